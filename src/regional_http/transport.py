"""
transport.py — The injectable request primitive.

A transport is any ``async (url, options) -> response`` callable whose
response exposes ``status_code``, ``json()`` and ``text`` — httpx.Response
satisfies this. Components receive their transport at construction; tests
hand in an in-memory fake, production uses HttpxTransport.

HttpxTransport mirrors the browser request semantics callers rely on:

  credentials  omit         never send cookies
               same-origin  send cookies to our own origin only
               include      always send cookies
  mode         cors         cross-origin calls carry an ``Origin`` header
               same-origin  cross-origin URLs are refused
               no-cors      passed through untouched
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import httpx

from regional_http.errors import TransportError
from regional_http.models import RequestOptions
from regional_http.utils.logging import get_logger

log = get_logger(__name__)


class RawResponse(Protocol):
    status_code: int

    @property
    def text(self) -> str: ...

    def json(self) -> Any: ...


Transport = Callable[[str, RequestOptions], Awaitable[RawResponse]]


async def send(transport: Transport, url: str, options: RequestOptions) -> RawResponse:
    """Issue one transport call, normalizing network failures to TransportError."""
    log.debug("transport_send", url=url, method=options.method, credentials=options.credentials)
    try:
        return await transport(url, options)
    except TransportError:
        raise
    except httpx.TransportError as exc:
        log.warning("transport_failed", url=url, method=options.method, error=str(exc))
        raise TransportError(url, exc) from exc


def _origin_of(url: httpx.URL) -> tuple[str, str, int | None]:
    return url.scheme, url.host, url.port


class HttpxTransport:
    """Production transport backed by a shared httpx.AsyncClient."""

    def __init__(
        self,
        origin: str,
        *,
        timeout: float = 30.0,
        cookies: httpx.Cookies | dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            origin:  Our own origin; relative URLs resolve against it.
            timeout: Per-request timeout in seconds.
            cookies: Initial cookie jar (session cookies, auth).
            client:  Pre-built client, mainly for tests. Closed by aclose().
        """
        self._origin = httpx.URL(origin.rstrip("/"))
        self._client = client or httpx.AsyncClient(
            base_url=str(self._origin),
            timeout=timeout,
            cookies=cookies,
        )

    @property
    def origin(self) -> str:
        return str(self._origin)

    def _is_same_origin(self, url: httpx.URL) -> bool:
        if url.is_relative_url:
            return True
        return _origin_of(url) == _origin_of(self._origin)

    async def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        target = httpx.URL(url)
        same_origin = self._is_same_origin(target)

        if options.mode == "same-origin" and not same_origin:
            raise TransportError(url, ValueError("cross-origin request refused in same-origin mode"))

        headers = dict(options.headers)
        if options.mode == "cors" and not same_origin:
            headers.setdefault("Origin", str(self._origin))

        request = self._client.build_request(
            options.method.upper(),
            url,
            headers=headers,
            content=options.content,
        )
        send_cookies = options.credentials == "include" or (
            options.credentials == "same-origin" and same_origin
        )
        if send_cookies:
            return await self._client.send(request)

        # Uncredentialed calls neither send nor store cookies
        request.headers.pop("Cookie", None)
        saved = httpx.Cookies(self._client.cookies)
        try:
            return await self._client.send(request)
        finally:
            self._client.cookies = saved

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
