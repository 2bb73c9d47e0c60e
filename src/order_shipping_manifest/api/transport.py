from __future__ import annotations

from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# Admin API answers 429 when the leaky bucket is empty and sends Retry-After
THROTTLE_STATUSES = (429, 500, 502, 503, 504)
USER_AGENT = "order-shipping-manifest/0.1"
# Connections kept per host; matches the tag batch worker cap
POOL_MAXSIZE = 10


class RequestsTransport:
    """Session with a retry policy for the Admin GraphQL endpoint.

    Only POST is used (GraphQL mutations). Throttling and 5xx answers are
    retried with backoff, honouring Retry-After; once retries run out the last
    response is returned as-is so the caller can report the status. Nothing
    above this class retries.
    """

    def __init__(
        self,
        timeout: int = 30,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        pool_maxsize: int = POOL_MAXSIZE,
    ) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

        policy = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            status=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=THROTTLE_STATUSES,
            allowed_methods=frozenset({"POST"}),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=policy, pool_maxsize=pool_maxsize)
        self.session.mount("https://", adapter)

    def post(self, url: str, *, headers: Optional[Dict[str, str]] = None, json: Any = None) -> requests.Response:
        return self.session.post(url, headers=headers, json=json, timeout=self.timeout)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
