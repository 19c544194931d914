"""
tests/test_dispatcher.py — Tests for RequestDispatcher.

Tests cover:
  - URL assembly (origin + path + query)
  - Credentials / CORS override for cross-region calls
  - Header merging and JSON body serialization
  - Response classification surfaced to callers
"""

from __future__ import annotations

import json

import httpx
import pytest

from regional_http.cache import TTLCache
from regional_http.dispatcher import RequestDispatcher, merge_headers
from regional_http.domains import DomainConfigFetcher
from regional_http.errors import HttpStatusError, TransportError
from regional_http.feature_flags import FeatureFlagFetcher
from regional_http.models import RequestOptions
from regional_http.resolver import RegionalOriginResolver
from regional_http.responses import Failure, Success
from tests.conftest import ACTIVE_FLAG_URL, FakeTransport, cross_region_routes


def _dispatcher(transport: FakeTransport) -> RequestDispatcher:
    domains = DomainConfigFetcher(transport, TTLCache(3600))
    resolver = RegionalOriginResolver(domains, FeatureFlagFetcher(transport))
    return RequestDispatcher(transport, resolver)


# ---------------------------------------------------------------------------
# merge_headers
# ---------------------------------------------------------------------------

class TestMergeHeaders:
    def test_later_layers_win(self):
        assert merge_headers({"A": "1"}, {"A": "2"}) == {"A": "2"}

    def test_case_insensitive_override(self):
        assert merge_headers({"Content-Type": "text/plain"}, {"content-type": "x"}) == {"content-type": "x"}

    def test_none_layers_skipped(self):
        assert merge_headers({"A": "1"}, None) == {"A": "1"}


# ---------------------------------------------------------------------------
# Same-origin requests
# ---------------------------------------------------------------------------

class TestSameOrigin:
    @pytest.mark.asyncio
    async def test_relative_url_with_query_in_caller_order(self):
        transport = FakeTransport({"/api/runs?b=2&a=1": httpx.Response(200, json=[1])})

        payload = await _dispatcher(transport).request("/api/runs", RequestOptions(query={"b": "2", "a": "1"}))

        assert payload == [1]
        assert transport.urls() == ["/api/runs?b=2&a=1"]

    @pytest.mark.asyncio
    async def test_default_credentials_and_headers(self):
        transport = FakeTransport({"/api/runs": httpx.Response(200, json={})})

        await _dispatcher(transport).request("/api/runs")

        _, options = transport.calls[0]
        assert options.method == "GET"
        assert options.credentials == "same-origin"
        assert options.headers == {"Accepts": "application/json"}
        assert options.content is None

    @pytest.mark.asyncio
    async def test_caller_credentials_respected(self):
        transport = FakeTransport({"/api/runs": httpx.Response(200, json={})})

        await _dispatcher(transport).request("/api/runs", RequestOptions(credentials="omit"))

        assert transport.calls[0][1].credentials == "omit"

    @pytest.mark.asyncio
    async def test_no_lookups_without_active_status(self):
        transport = FakeTransport({"/api/runs": httpx.Response(200, json={})})

        await _dispatcher(transport).request("/api/runs", RequestOptions(domain="orders"))

        assert transport.urls() == ["/api/runs"]


# ---------------------------------------------------------------------------
# Cross-region requests
# ---------------------------------------------------------------------------

class TestCrossRegion:
    @pytest.mark.asyncio
    async def test_origin_prepended(self):
        routes = cross_region_routes()
        routes["https://p1.example.com/api/runs?state=open"] = httpx.Response(200, json={"runs": []})
        transport = FakeTransport(routes)

        payload = await _dispatcher(transport).request(
            "/api/runs",
            RequestOptions(query={"state": "open"}, domain="orders", active_status="passive"),
        )

        assert payload == {"runs": []}
        assert transport.urls()[-1] == "https://p1.example.com/api/runs?state=open"

    @pytest.mark.asyncio
    async def test_credentials_and_mode_overridden(self):
        routes = cross_region_routes()
        routes["https://a1.example.com/api/runs"] = httpx.Response(200, json={})
        transport = FakeTransport(routes)

        await _dispatcher(transport).request(
            "/api/runs",
            RequestOptions(domain="orders", active_status="active", credentials="omit", mode="same-origin"),
        )

        _, options = transport.calls[-1]
        assert options.credentials == "include"
        assert options.mode == "cors"

    @pytest.mark.asyncio
    async def test_empty_origin_still_opts_into_credentials(self):
        routes = cross_region_routes()
        routes[ACTIVE_FLAG_URL] = httpx.Response(200, json={})
        routes["/api/runs"] = httpx.Response(200, json={})
        transport = FakeTransport(routes)

        await _dispatcher(transport).request("/api/runs", RequestOptions(domain="orders", active_status="active"))

        url, options = transport.calls[-1]
        assert url == "/api/runs"
        assert options.credentials == "include"

    @pytest.mark.asyncio
    async def test_active_status_requires_domain(self):
        with pytest.raises(ValueError):
            await _dispatcher(FakeTransport()).request("/api/runs", RequestOptions(active_status="active"))

    @pytest.mark.asyncio
    async def test_invalid_active_status(self):
        with pytest.raises(ValueError):
            await _dispatcher(FakeTransport()).request(
                "/api/runs", RequestOptions(domain="orders", active_status="standby")  # type: ignore[arg-type]
            )

    @pytest.mark.asyncio
    async def test_resolution_failure_skips_dispatch(self):
        routes = cross_region_routes()
        routes["/api/domains/orders"] = httpx.Response(404, json={"error": "no such domain"})
        transport = FakeTransport(routes)

        with pytest.raises(HttpStatusError):
            await _dispatcher(transport).request("/api/runs", RequestOptions(domain="orders", active_status="active"))

        assert transport.urls() == ["/api/domains/orders"]


# ---------------------------------------------------------------------------
# Bodies and headers
# ---------------------------------------------------------------------------

class TestBodies:
    @pytest.mark.asyncio
    async def test_body_serialized_with_content_type(self):
        transport = FakeTransport({"/api/runs": httpx.Response(201, json={"id": 7})})

        payload = await _dispatcher(transport).request(
            "/api/runs",
            RequestOptions(method="post", body={"name": "nightly"}, headers={"X-Trace": "abc"}),
        )

        assert payload == {"id": 7}
        _, options = transport.calls[0]
        assert options.method == "POST"
        assert json.loads(options.content) == {"name": "nightly"}
        assert options.headers == {
            "Accepts": "application/json",
            "X-Trace": "abc",
            "Content-Type": "application/json",
        }

    @pytest.mark.asyncio
    async def test_get_has_no_content_type(self):
        transport = FakeTransport({"/api/runs": httpx.Response(200, json={})})
        await _dispatcher(transport).request("/api/runs", RequestOptions(headers={"X-Trace": "abc"}))
        assert "Content-Type" not in transport.calls[0][1].headers


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    @pytest.mark.asyncio
    async def test_204_resolves_to_none(self):
        transport = FakeTransport({"/api/runs/1": httpx.Response(204)})
        assert await _dispatcher(transport).request("/api/runs/1", RequestOptions(method="DELETE", body={})) is None

    @pytest.mark.asyncio
    async def test_404_raises_with_body(self):
        transport = FakeTransport({"/api/runs/1": httpx.Response(404, json={"error": "x"})})
        with pytest.raises(HttpStatusError) as exc_info:
            await _dispatcher(transport).request("/api/runs/1")
        assert exc_info.value.body == {"error": "x"}
        assert exc_info.value.url == "/api/runs/1"

    @pytest.mark.asyncio
    async def test_dispatch_returns_outcome(self):
        transport = FakeTransport({
            "/ok": httpx.Response(200, json={"a": 1}),
            "/boom": httpx.Response(500, text="boom"),
        })
        dispatcher = _dispatcher(transport)

        assert await dispatcher.dispatch("/ok") == Success({"a": 1})
        failure = await dispatcher.dispatch("/boom")
        assert isinstance(failure, Failure)
        assert not failure.has_body

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        transport = FakeTransport({"/api/runs": httpx.ConnectError("dns failure")})
        with pytest.raises(TransportError):
            await _dispatcher(transport).request("/api/runs")
