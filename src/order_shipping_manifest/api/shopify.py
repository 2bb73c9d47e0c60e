from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import logging

from order_shipping_manifest.errors import TagUpdateError
from order_shipping_manifest.models import EnvCfg, TagUpdate
from order_shipping_manifest.models.env_cfg import DEFAULT_API_VERSION

from .transport import RequestsTransport

CUSTOMER_TAGS_MUTATION = """
mutation updateCustomerTags($input: CustomerInput!) {
  customerUpdate(input: $input) {
    customer {
      id
      tags
    }
    userErrors {
      field
      message
    }
  }
}
"""

ORDER_TAGS_MUTATION = """
mutation orderUpdate($input: OrderInput!) {
  orderUpdate(input: $input) {
    order {
      id
      tags
    }
    userErrors {
      field
      message
    }
  }
}
"""

_MUTATIONS = {
    "customer": ("customerUpdate", CUSTOMER_TAGS_MUTATION),
    "order": ("orderUpdate", ORDER_TAGS_MUTATION),
}


def _truncate(text: Optional[str], limit: int = 2000) -> Optional[str]:
    if text and len(text) > limit:
        return text[:limit] + "..."
    return text


@dataclass
class ShopifyConfig:
    shop_domain: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION

    @classmethod
    def from_env(cls, env_cfg: EnvCfg) -> "ShopifyConfig":
        return cls(
            shop_domain=env_cfg.SHOPIFY_SHOP_DOMAIN,
            access_token=env_cfg.SHOPIFY_ACCESS_TOKEN,
            api_version=env_cfg.SHOPIFY_API_VERSION or DEFAULT_API_VERSION,
        )

    @property
    def graphql_url(self) -> str:
        domain = self.shop_domain.strip().rstrip("/")
        if not domain.startswith(("http://", "https://")):
            domain = "https://" + domain
        return f"{domain}/admin/api/{self.api_version}/graphql.json"


class ShopifyAdminClient:
    """Minimal Admin GraphQL client for tag mutations.

    update_tags() sends one customerUpdate/orderUpdate and raises
    TagUpdateError when the HTTP call fails, the response carries GraphQL
    errors, or the mutation returns userErrors. Retries (if any) happen in
    the transport.
    """

    def __init__(
        self,
        cfg: ShopifyConfig,
        transport: Optional[RequestsTransport] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cfg = cfg
        self.transport = transport or RequestsTransport()
        self.logger: logging.Logger = logger or logging.getLogger(
            "order_shipping_manifest.api.shopify"
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.cfg.access_token,
        }

    def update_tags(self, update: TagUpdate) -> Dict[str, Any]:
        try:
            root, query = _MUTATIONS[update.kind]
        except KeyError:
            raise TagUpdateError(
                f"unsupported record kind: {update.kind}", record_id=update.record_id) from None

        body = {"query": query, "variables": update.to_variables()}
        endpoint = self.cfg.graphql_url
        self.logger.debug(
            "Shopify POST endpoint=%s variables=%s",
            endpoint,
            json.dumps(body["variables"], ensure_ascii=False),
        )

        try:
            resp = self.transport.post(endpoint, headers=self._headers(), json=body)
        except Exception as ex:  # network/transport error
            raise TagUpdateError(
                f"タグの更新に失敗しました: {ex}", record_id=update.record_id) from ex

        if not getattr(resp, "ok", False):
            self.logger.warning(
                "Shopify POST endpoint=%s returned error status=%s response_body=%s",
                endpoint,
                getattr(resp, "status_code", None),
                _truncate(getattr(resp, "text", None)),
            )
            raise TagUpdateError(
                f"タグの更新に失敗しました: {getattr(resp, 'reason', '') or resp.status_code}",
                record_id=update.record_id,
            )

        try:
            payload = resp.json()
        except ValueError as ex:
            raise TagUpdateError(
                f"タグの更新に失敗しました: invalid JSON response ({ex})", record_id=update.record_id) from ex

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            msg = first.get("message") if isinstance(first, dict) else str(first)
            raise TagUpdateError(str(msg), record_id=update.record_id)

        result = ((payload.get("data") or {}).get(root)) or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            first = user_errors[0]
            raise TagUpdateError(
                str(first.get("message") or "userErrors returned"),
                record_id=update.record_id,
                field=first.get("field"),
            )

        self.logger.debug("Shopify %s ok for %s", root, update.record_id)
        return payload
