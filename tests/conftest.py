"""
tests/conftest.py — Shared pytest fixtures.

Provides:
  FakeTransport    — in-memory transport recording every (url, options) call
  fake_transport   — an empty FakeTransport; register routes per test
  service          — HttpService wired to fake_transport
  mock_http        — configured respx router for faking httpx traffic
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest
import respx
import structlog

from regional_http.models import RequestOptions
from regional_http.service import HttpService

Handler = httpx.Response | BaseException | Callable[[str, RequestOptions], Any]


class FakeTransport:
    """
    Maps exact URLs to a response, an exception to raise, or a (sync or async)
    handler. Unknown URLs answer 404.
    """

    def __init__(self, routes: dict[str, Handler] | None = None) -> None:
        self.routes: dict[str, Handler] = dict(routes or {})
        self.calls: list[tuple[str, RequestOptions]] = []

    def add(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    def count(self, url: str) -> int:
        return self.urls().count(url)

    async def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        self.calls.append((url, options))
        handler = self.routes.get(url)
        if handler is None:
            return httpx.Response(404, json={"error": f"no route for {url}"})
        if isinstance(handler, BaseException):
            raise handler
        if isinstance(handler, httpx.Response):
            return handler
        result = handler(url, options)
        if hasattr(result, "__await__"):
            result = await result
        return result


DOMAIN_URL = "/api/domains/orders"
ACTIVE_FLAG_URL = "/api/feature-flags/crossRegion.clusterToRegionalDomainUrl?cluster=a1"
PASSIVE_FLAG_URL = "/api/feature-flags/crossRegion.clusterToRegionalDomainUrl?cluster=p1"


def cross_region_routes() -> dict[str, Handler]:
    """Domain `orders` with clusters a1 (active) / p1 (passive) and their origins."""
    return {
        DOMAIN_URL: httpx.Response(
            200, json={"name": "orders", "activeCluster": "a1", "passiveCluster": "p1"}
        ),
        ACTIVE_FLAG_URL: httpx.Response(200, json={"value": "https://a1.example.com"}),
        PASSIVE_FLAG_URL: httpx.Response(200, json={"value": "https://p1.example.com"}),
    }


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service(fake_transport: FakeTransport) -> HttpService:
    return HttpService(fake_transport, cache_ttl=3600)


@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get("https://...").mock(return_value=httpx.Response(200, json={...}))
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI tests configure structlog against CliRunner streams that close afterwards
    yield
    structlog.reset_defaults()
