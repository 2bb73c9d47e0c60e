import pytest
import requests

from order_shipping_manifest.api.shopify import (
    CUSTOMER_TAGS_MUTATION,
    ORDER_TAGS_MUTATION,
    ShopifyAdminClient,
    ShopifyConfig,
)
from order_shipping_manifest.errors import TagUpdateError
from order_shipping_manifest.models import EnvCfg, TagSet, TagUpdate


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", reason="OK", bad_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self.reason = reason
        self.text = text
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeTransport:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, *, headers=None, json=None):
        self.calls.append({"url": url, "headers": headers, "json": json})
        if self.exc is not None:
            raise self.exc
        return self.response


CFG = ShopifyConfig("example.myshopify.com", "shpat_test", "2024-10")
UPDATE = TagUpdate("gid://shopify/Customer/1", TagSet(["vip"]))


def _ok(root="customerUpdate"):
    return FakeResponse(payload={"data": {root: {"userErrors": []}}})


def test_graphql_url():
    assert CFG.graphql_url == "https://example.myshopify.com/admin/api/2024-10/graphql.json"
    assert ShopifyConfig("https://x.myshopify.com/", "t").graphql_url.startswith(
        "https://x.myshopify.com/admin/api/")


def test_config_from_env():
    cfg = ShopifyConfig.from_env(EnvCfg("s.myshopify.com", "tok", ""))
    assert cfg.shop_domain == "s.myshopify.com"
    assert cfg.api_version == "2024-10"


def test_customer_update_posts_mutation_and_token():
    transport = FakeTransport(_ok())
    ShopifyAdminClient(CFG, transport).update_tags(UPDATE)

    (call,) = transport.calls
    assert call["headers"]["X-Shopify-Access-Token"] == "shpat_test"
    assert call["json"]["query"] == CUSTOMER_TAGS_MUTATION
    assert call["json"]["variables"] == {"input": {"id": "gid://shopify/Customer/1", "tags": ["vip"]}}


def test_order_update_uses_order_mutation():
    transport = FakeTransport(_ok("orderUpdate"))
    update = TagUpdate("gid://shopify/Order/1", TagSet(["paid"]), kind="order")
    ShopifyAdminClient(CFG, transport).update_tags(update)
    assert transport.calls[0]["json"]["query"] == ORDER_TAGS_MUTATION


def test_user_errors_raise_with_field():
    resp = FakeResponse(payload={"data": {"customerUpdate": {
        "userErrors": [{"field": ["tags"], "message": "Tags is invalid"}]}}})

    with pytest.raises(TagUpdateError) as exc:
        ShopifyAdminClient(CFG, FakeTransport(resp)).update_tags(UPDATE)

    assert str(exc.value) == "Tags is invalid"
    assert exc.value.field == ["tags"]
    assert exc.value.record_id == "gid://shopify/Customer/1"


def test_top_level_graphql_errors_raise():
    resp = FakeResponse(payload={"errors": [{"message": "Throttled"}]})
    with pytest.raises(TagUpdateError, match="Throttled"):
        ShopifyAdminClient(CFG, FakeTransport(resp)).update_tags(UPDATE)


def test_http_failure_raises():
    resp = FakeResponse(status_code=401, reason="Unauthorized", text="bad token")
    with pytest.raises(TagUpdateError, match="タグの更新に失敗しました: Unauthorized"):
        ShopifyAdminClient(CFG, FakeTransport(resp)).update_tags(UPDATE)


def test_transport_exception_is_wrapped():
    transport = FakeTransport(exc=requests.ConnectionError("connection reset"))
    with pytest.raises(TagUpdateError) as exc:
        ShopifyAdminClient(CFG, transport).update_tags(UPDATE)
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_invalid_json_raises():
    resp = FakeResponse(bad_json=True)
    with pytest.raises(TagUpdateError, match="invalid JSON"):
        ShopifyAdminClient(CFG, FakeTransport(resp)).update_tags(UPDATE)


def test_unknown_kind_raises():
    update = TagUpdate("gid://shopify/Product/1", TagSet(["x"]), kind="product")
    with pytest.raises(TagUpdateError):
        ShopifyAdminClient(CFG, FakeTransport(_ok())).update_tags(update)
