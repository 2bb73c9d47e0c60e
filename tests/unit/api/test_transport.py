from order_shipping_manifest.api.transport import POOL_MAXSIZE, USER_AGENT, RequestsTransport
from order_shipping_manifest.pipelines.tag_reconciler import DEFAULT_MAX_WORKERS


def test_retry_policy_is_mounted_for_post():
    t = RequestsTransport(timeout=5, max_retries=2)
    retry = t.session.get_adapter("https://example.myshopify.com").max_retries

    assert t.timeout == 5
    assert retry.total == 2
    assert 429 in retry.status_forcelist
    assert "POST" in retry.allowed_methods
    assert "GET" not in retry.allowed_methods
    assert retry.raise_on_status is False
    assert t.session.headers["User-Agent"] == USER_AGENT


def test_post_passes_timeout(monkeypatch):
    t = RequestsTransport(timeout=7)
    seen = {}

    def fake_post(url, **kwargs):
        seen.update(kwargs, url=url)
        return "resp"

    monkeypatch.setattr(t.session, "post", fake_post)

    assert t.post("https://x/graphql.json", headers={"a": "b"}, json={"q": 1}) == "resp"
    assert seen["timeout"] == 7
    assert seen["json"] == {"q": 1}


def test_context_manager_closes_session(monkeypatch):
    closed = []
    with RequestsTransport() as t:
        monkeypatch.setattr(t.session, "close", lambda: closed.append(True))
    assert closed == [True]


def test_connection_pool_fits_a_full_tag_batch():
    adapter = RequestsTransport().session.get_adapter("https://example.myshopify.com")
    assert adapter._pool_maxsize == POOL_MAXSIZE
    assert POOL_MAXSIZE >= DEFAULT_MAX_WORKERS

    wide = RequestsTransport(pool_maxsize=32).session.get_adapter("https://example.myshopify.com")
    assert wide._pool_maxsize == 32
