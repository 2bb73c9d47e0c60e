from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

PACKAGE_LOGGER = "order_shipping_manifest"

# timestamp | level | logger | message
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty at DEBUG (one line per retry/connection); kept at WARNING unless asked
NOISY_LOGGERS = ("urllib3", "requests")

LevelLike = Optional[Union[int, str]]


def resolve_level(level: LevelLike) -> int:
    """'debug' / 'WARN' / 10 -> logging level; None reads LOG_LEVEL, default INFO."""
    if level is None or level == "":
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name == "WARN":
        name = "WARNING"
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def default_log_path_for_input(input_path: Union[str, Path]) -> Path:
    """orders.json -> orders.log, same folder."""
    return Path(input_path).with_suffix(".log")


def _is_console(h: logging.Handler) -> bool:
    return (
        type(h) is logging.StreamHandler
        and getattr(h, "stream", None) in (sys.stderr, sys.stdout)
    )


def _writes_to(h: logging.Handler, path: Path) -> bool:
    return isinstance(h, RotatingFileHandler) and Path(h.baseFilename).resolve() == path.resolve()


def get_logger(
    name: Optional[str] = PACKAGE_LOGGER,
    *,
    level: LevelLike = None,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    propagate: bool = False,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure `name` for a CLI run and return it.

    Repeated calls never stack handlers: at most one stderr handler, and one
    rotating file handler per distinct path. Every handler follows the
    logger's current level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    logger.propagate = propagate
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    if console and not any(_is_console(h) for h in logger.handlers):
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    if log_file is not None:
        path = Path(log_file)
        if not any(_writes_to(h, path) for h in logger.handlers):
            path.parent.mkdir(parents=True, exist_ok=True)
            rotating = RotatingFileHandler(
                path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8", delay=True)
            rotating.setFormatter(formatter)
            logger.addHandler(rotating)

    for h in logger.handlers:
        h.setLevel(logger.level)
    return logger


def quiet_http_loggers(level: LevelLike = logging.WARNING, names: Iterable[str] = NOISY_LOGGERS) -> None:
    for n in names:
        logging.getLogger(n).setLevel(resolve_level(level))


def reset_logger(name: Optional[str] = PACKAGE_LOGGER) -> None:
    """Detach and close every handler (tests, repeated CLI runs in one process)."""
    logger = logging.getLogger(name)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
