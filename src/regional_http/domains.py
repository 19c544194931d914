"""
domains.py — Domain topology lookups.

Endpoint:
  GET {domains_path}/{domain}  ->  DomainConfig-shaped JSON

Lookups are memoized per domain in a TTLCache, so concurrent callers for the
same domain share one request and later callers reuse the answer until the
entry expires.
"""

from __future__ import annotations

from urllib.parse import quote

from regional_http.cache import TTLCache
from regional_http.constants import DEFAULT_CREDENTIALS, DEFAULT_HEADERS
from regional_http.models import DomainConfig, RequestOptions
from regional_http.responses import classify_response, unwrap
from regional_http.transport import Transport, send
from regional_http.utils.logging import get_logger

log = get_logger(__name__)


class DomainConfigFetcher:
    """Fetches DomainConfig for a domain, backed by a TTL cache."""

    def __init__(
        self,
        transport: Transport,
        cache: TTLCache[DomainConfig],
        *,
        base_path: str = "/api/domains",
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._base_path = base_path.rstrip("/")

    @property
    def cache(self) -> TTLCache[DomainConfig]:
        return self._cache

    async def fetch_domain_config(self, domain: str) -> DomainConfig:
        """Uncached lookup: always issues a request."""
        url = f"{self._base_path}/{quote(domain, safe='')}"
        options = RequestOptions(
            method="GET",
            headers=dict(DEFAULT_HEADERS),
            credentials=DEFAULT_CREDENTIALS,
        )
        log.info("domain_config_fetch", domain=domain, url=url)
        response = await send(self._transport, url, options)
        payload = unwrap(classify_response(response), url)
        config = DomainConfig.from_payload(payload if isinstance(payload, dict) else None)
        log.debug(
            "domain_config_fetched",
            domain=domain,
            active_cluster=config.active_cluster,
            passive_cluster=config.passive_cluster,
        )
        return config

    async def get_domain_config(self, domain: str) -> DomainConfig:
        """Cached lookup."""
        return await self._cache.get(domain, lambda: self.fetch_domain_config(domain))
