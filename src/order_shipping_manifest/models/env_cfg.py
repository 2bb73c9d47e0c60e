from __future__ import annotations
from dataclasses import dataclass

DEFAULT_API_VERSION = "2024-10"


@dataclass(frozen=True)
class EnvCfg:
    """Minimal shape we need from get_app_env()."""
    SHOPIFY_SHOP_DOMAIN: str = ""
    SHOPIFY_ACCESS_TOKEN: str = ""
    SHOPIFY_API_VERSION: str = DEFAULT_API_VERSION

    @property
    def has_credentials(self) -> bool:
        return bool(self.SHOPIFY_SHOP_DOMAIN and self.SHOPIFY_ACCESS_TOKEN)
