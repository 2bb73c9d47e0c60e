# src/order_shipping_manifest/config/env.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from dotenv import dotenv_values, find_dotenv, load_dotenv

from order_shipping_manifest.errors import ManifestError
from order_shipping_manifest.models import EnvCfg
from order_shipping_manifest.models.env_cfg import DEFAULT_API_VERSION


class EnvError(ManifestError):
    """Shopify settings are missing from the process environment / .env."""


# Needed only for live tag updates; exports and dry runs work without them
REQUIRED_KEYS: Tuple[str, ...] = (
    "SHOPIFY_SHOP_DOMAIN",
    "SHOPIFY_ACCESS_TOKEN",
)


def _find_env_file(start: Path) -> Optional[Path]:
    found = find_dotenv(filename=".env", usecwd=True)
    if found:
        return Path(found)
    # find_dotenv only looks upward from CWD
    for folder in (start, *start.parents):
        candidate = folder / ".env"
        if candidate.is_file():
            return candidate
    return None


def load_project_dotenv(start: Optional[Path] = None, *, override: bool = False) -> Path:
    """
    Load the nearest .env above `start` (default: CWD) into os.environ.

    Values already present in the environment win unless `override=True`.
    Returns the resolved file path, or Path() when there is none.
    """
    path = _find_env_file(Path.cwd() if start is None else Path(start))
    if path is None or not path.is_file():
        return Path()
    load_dotenv(dotenv_path=path, override=override)
    return path.resolve()


def env(name: str, *, default: Optional[str] = None, required: bool = False, cast=None):
    """os.getenv with `required` (-> EnvError) and an optional `cast`.

    An empty string counts as missing.
    """
    raw = os.getenv(name)
    if not raw:
        if required:
            raise EnvError(f"Missing required environment variable: {name}")
        return default
    return cast(raw) if cast is not None else raw


def missing_keys(keys: Iterable[str]) -> list[str]:
    return [k for k in keys if not os.getenv(k)]


def load_env(
    dotenv_path: Optional[Path] = None,
    *,
    override: bool = False,
    required_keys: Tuple[str, ...] = (),
    strict: bool = False,
) -> Dict[str, str]:
    """
    Apply a .env file to the process environment.

    Returns the pairs the file defines (not the effective values). With no
    `dotenv_path` the nearest .env is used. `strict=True` raises EnvError
    listing every `required_keys` entry still unset afterwards.
    """
    if dotenv_path:
        path = Path(dotenv_path)
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
        else:
            path = None
    else:
        found = load_project_dotenv(override=override)
        path = found if found != Path() else None

    defined: Dict[str, str] = {}
    if path is not None:
        defined = {k: v for k, v in dotenv_values(path).items() if v is not None}

    if strict:
        missing = missing_keys(required_keys)
        if missing:
            raise EnvError(
                f"Missing required environment variable(s): {', '.join(missing)}")
    return defined


def get_app_env(dotenv_path: Path | str | None = ".env", *, strict: bool = True) -> EnvCfg:
    """
    Shopify connection settings as an EnvCfg.

    `dotenv_path=None` skips the file entirely (tests). Blank values come back
    as "" when `strict=False`; the API version falls back to DEFAULT_API_VERSION.
    """
    if dotenv_path:
        load_env(Path(dotenv_path), required_keys=REQUIRED_KEYS, strict=strict)
    elif strict and missing_keys(REQUIRED_KEYS):
        raise EnvError(
            f"Missing required environment variable(s): {', '.join(missing_keys(REQUIRED_KEYS))}")

    return EnvCfg(
        SHOPIFY_SHOP_DOMAIN=os.getenv("SHOPIFY_SHOP_DOMAIN", ""),
        SHOPIFY_ACCESS_TOKEN=os.getenv("SHOPIFY_ACCESS_TOKEN", ""),
        SHOPIFY_API_VERSION=os.getenv("SHOPIFY_API_VERSION") or DEFAULT_API_VERSION,
    )


__all__ = [
    "EnvError",
    "REQUIRED_KEYS",
    "load_project_dotenv",
    "load_env",
    "missing_keys",
    "env",
    "get_app_env",
]
