"""
service.py — HttpService facade.

Wires one cache, fetcher, resolver and dispatcher around a single injected
transport. There is no module-level instance: build one per application (or
per test) and pass it to whoever needs it.

Usage:
    async with build_http_service() as http:
        origin = await http.resolve_origin("orders", "passive")
        runs = await http.get("/api/runs", query={"state": "open"},
                              domain="orders", active_status="passive")
        await http.post("/api/runs", {"name": "nightly"})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from regional_http.cache import TTLCache
from regional_http.config import Settings
from regional_http.constants import ActiveStatus
from regional_http.dispatcher import RequestDispatcher
from regional_http.domains import DomainConfigFetcher
from regional_http.feature_flags import FeatureFlagFetcher
from regional_http.models import DomainConfig, RequestOptions
from regional_http.resolver import RegionalOriginResolver
from regional_http.responses import Outcome
from regional_http.transport import HttpxTransport, Transport


class HttpService:
    def __init__(
        self,
        transport: Transport,
        *,
        cache_ttl: float,
        domains_path: str = "/api/domains",
        feature_flags_path: str = "/api/feature-flags",
        cross_region_flag: str | None = None,
        owns_transport: bool = False,
    ) -> None:
        self.transport = transport
        self.domain_cache: TTLCache[DomainConfig] = TTLCache(cache_ttl)
        self.domains = DomainConfigFetcher(transport, self.domain_cache, base_path=domains_path)
        self.flags = FeatureFlagFetcher(transport, base_path=feature_flags_path)
        resolver_kwargs = {"flag_name": cross_region_flag} if cross_region_flag else {}
        self.resolver = RegionalOriginResolver(self.domains, self.flags, **resolver_kwargs)
        self.dispatcher = RequestDispatcher(transport, self.resolver)
        self._owns_transport = owns_transport

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_domain_config(self, domain: str) -> DomainConfig:
        return await self.domains.get_domain_config(domain)

    async def get_feature_flag(self, name: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.flags.get_feature_flag(name, params)

    async def resolve_origin(self, domain: str, active_status: ActiveStatus) -> str:
        return await self.resolver.resolve_origin(domain, active_status)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(self, path: str, options: RequestOptions | None = None) -> Any:
        return await self.dispatcher.request(path, options)

    async def dispatch(self, path: str, options: RequestOptions | None = None) -> Outcome:
        return await self.dispatcher.dispatch(path, options)

    async def get(self, path: str, **options: Any) -> Any:
        return await self.request(path, _options("GET", None, options))

    async def post(self, path: str, body: Any, **options: Any) -> Any:
        return await self.request(path, _options("POST", body, options))

    async def put(self, path: str, body: Any, **options: Any) -> Any:
        return await self.request(path, _options("PUT", body, options))

    async def delete(self, path: str, body: Any, **options: Any) -> Any:
        return await self.request(path, _options("DELETE", body, options))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_transport and hasattr(self.transport, "aclose"):
            await self.transport.aclose()  # type: ignore[attr-defined]

    async def __aenter__(self) -> "HttpService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _options(method: str, body: Any, extra: dict[str, Any]) -> RequestOptions:
    """Build RequestOptions for a convenience verb."""
    fields = {
        **extra,
        "method": method,
        "body": body,
    }
    fields["query"] = fields.get("query") or {}
    fields["headers"] = fields.get("headers") or {}
    return RequestOptions(**fields)


def build_http_service(
    settings: Settings | None = None,
    transport: Transport | None = None,
) -> HttpService:
    """
    Build an HttpService from settings.

    Args:
        settings:  Defaults to the module-level regional_http.config.settings.
        transport: Defaults to an HttpxTransport on settings.origin, which the
                   service then closes on aclose().
    """
    if settings is None:
        from regional_http.config import settings as default_settings

        settings = default_settings

    owns_transport = transport is None
    if transport is None:
        transport = HttpxTransport(settings.origin, timeout=settings.http_timeout_seconds)

    return HttpService(
        transport,
        cache_ttl=settings.domain_cache_ttl_seconds,
        domains_path=settings.domains_path,
        feature_flags_path=settings.feature_flags_path,
        cross_region_flag=settings.cross_region_flag,
        owns_transport=owns_transport,
    )
