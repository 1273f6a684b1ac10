"""
Subscriptions Service client.
"""

import ssl
import time
from typing import List, Optional, Protocol, Tuple
from urllib.parse import quote

import httpx

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.retry import RetryConfig, RetryError, call_with_retry
from ..bundles.models import SUBSCRIPTIONS_SERVICE_ENDPOINT, SubscriptionLookupResult


SEARCH_PATH = "/svcrest/subscription/v5/search/criteria;web_customer_id={org_id};sku={skus}/options;products=ALL"


class SubscriptionLookup(Protocol):
    """Anything that can fetch the SKUs held by an organization."""

    async def lookup(self, org_id: str, sku_filter: str = "") -> SubscriptionLookupResult:
        ...


class MalformedSubscriptionsResponse(ValueError):
    """A 200 response whose body is not the expected shape."""


class _RetryableStatus(Exception):
    def __init__(self, response: httpx.Response):
        super().__init__(f"Subscriptions Service returned {response.status_code}")
        self.response = response


def build_ssl_context(cert_path: Optional[str] = None,
                      key_path: Optional[str] = None,
                      ca_path: Optional[str] = None) -> Optional[ssl.SSLContext]:
    """SSL context for mutual TLS, or None when no certificate is configured."""
    if not cert_path and not ca_path:
        return None
    context = ssl.create_default_context(cafile=ca_path)
    if cert_path:
        context.load_cert_chain(cert_path, key_path)
    return context


def parse_skus(payload: object) -> Tuple[str, ...]:
    """Collect SKU values from a search response body.

    The body is a list of subscriptions, each with ``entries`` of
    ``{"value": <sku>}``. Order is preserved and duplicates dropped.
    """
    if not isinstance(payload, list):
        raise MalformedSubscriptionsResponse("expected a list of subscriptions")

    skus: List[str] = []
    seen = set()
    for subscription in payload:
        if not isinstance(subscription, dict):
            raise MalformedSubscriptionsResponse("subscription is not an object")
        for entry in subscription.get("entries") or []:
            if not isinstance(entry, dict) or not isinstance(entry.get("value"), str):
                raise MalformedSubscriptionsResponse("entry has no string value")
            value = entry["value"]
            if value not in seen:
                seen.add(value)
                skus.append(value)
    return tuple(skus)


class SubscriptionsClient:
    """HTTP client for the Subscriptions Service.

    Never raises for upstream problems: every outcome, including transport
    failures, comes back as a ``SubscriptionLookupResult``.
    """

    def __init__(self,
                 base_url: str = SUBSCRIPTIONS_SERVICE_ENDPOINT,
                 timeout: float = 10.0,
                 ssl_context: Optional[ssl.SSLContext] = None,
                 retry_config: Optional[RetryConfig] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.ssl_context = ssl_context
        self.retry_config = retry_config or RetryConfig(max_attempts=3)
        self.metrics = metrics
        self.logger = get_logger("entitlements.subscriptions_client")

    def build_url(self, org_id: str, sku_filter: str = "") -> str:
        return self.base_url + SEARCH_PATH.format(
            org_id=quote(org_id, safe=""),
            skus=quote(sku_filter, safe=","),
        )

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, verify=self.ssl_context or True) as client:
            response = await client.get(url, headers={"Accept": "application/json"})
        if response.status_code >= 500:
            raise _RetryableStatus(response)
        return response

    async def lookup(self, org_id: str, sku_filter: str = "") -> SubscriptionLookupResult:
        """Fetch the SKUs held by ``org_id``."""
        url = self.build_url(org_id, sku_filter)
        start_time = time.time()
        result = await self._lookup(url)
        duration = time.time() - start_time

        outcome = "success" if result.succeeded else ("transport_error" if result.transport_error else "bad_status")
        if self.metrics:
            self.metrics.record_subscription_lookup(outcome, duration)

        log = self.logger.info if result.succeeded else self.logger.warning
        log(
            "Subscriptions lookup completed",
            org_id=org_id,
            outcome=outcome,
            status_code=result.status_code,
            sku_count=len(result.skus),
            duration_ms=round(duration * 1000, 2)
        )
        return result

    async def _lookup(self, url: str) -> SubscriptionLookupResult:
        try:
            response = await call_with_retry(
                self._get, url,
                exceptions=(httpx.HTTPError, _RetryableStatus),
                config=self.retry_config
            )
        except RetryError as e:
            last = e.last_exception
            if isinstance(last, _RetryableStatus):
                return SubscriptionLookupResult(status_code=last.response.status_code)
            return SubscriptionLookupResult(status_code=0, transport_error=last)

        if response.status_code != 200:
            return SubscriptionLookupResult(status_code=response.status_code)

        try:
            skus = parse_skus(response.json())
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            return SubscriptionLookupResult(status_code=response.status_code, transport_error=e)

        return SubscriptionLookupResult(status_code=200, skus=skus)
