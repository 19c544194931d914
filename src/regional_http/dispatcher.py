"""
dispatcher.py — URL assembly, credentials / CORS policy and dispatch.

    url = {origin}{path}{?query}

When `active_status` is set the origin comes from the RegionalOriginResolver
and the call always goes out with ``credentials="include"`` and
``mode="cors"``, whatever the caller passed. Without it the URL stays
relative and the caller's (or default same-origin) credentials apply.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from regional_http.constants import (
    ACTIVE_STATUSES,
    BODY_METHODS,
    CROSS_REGION_CREDENTIALS,
    CROSS_REGION_MODE,
    DEFAULT_HEADERS,
    JSON_CONTENT_TYPE,
)
from regional_http.models import RequestOptions
from regional_http.resolver import RegionalOriginResolver
from regional_http.responses import Outcome, classify_response, unwrap
from regional_http.transport import Transport, send
from regional_http.utils.logging import get_logger
from regional_http.utils.query import append_query

log = get_logger(__name__)


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings left to right; later layers win, case-insensitively."""
    merged: dict[str, str] = {}
    names: dict[str, str] = {}
    for layer in layers:
        for name, value in (layer or {}).items():
            previous = names.get(name.lower())
            if previous is not None:
                del merged[previous]
            names[name.lower()] = name
            merged[name] = value
    return merged


class RequestDispatcher:
    def __init__(self, transport: Transport, resolver: RegionalOriginResolver) -> None:
        self._transport = transport
        self._resolver = resolver

    async def prepare(self, path: str, options: RequestOptions) -> tuple[str, RequestOptions]:
        """Resolve the final URL and the options actually handed to the transport."""
        method = options.method.upper()
        pathname = append_query(path, options.query)

        origin = ""
        overrides: dict[str, Any] = {}
        if options.active_status:
            if options.active_status not in ACTIVE_STATUSES:
                raise ValueError(f"Invalid active_status: {options.active_status!r}")
            if not options.domain:
                raise ValueError("A domain is required when active_status is set")
            origin = await self._resolver.resolve_origin(options.domain, options.active_status)
            overrides = {"credentials": CROSS_REGION_CREDENTIALS, "mode": CROSS_REGION_MODE}

        headers = merge_headers(
            DEFAULT_HEADERS,
            options.headers,
            {"Content-Type": JSON_CONTENT_TYPE} if method in BODY_METHODS else None,
        )
        content = json.dumps(options.body) if options.body is not None else None

        final = dataclasses.replace(
            options,
            method=method,
            headers=headers,
            content=content,
            **overrides,
        )
        return f"{origin}{pathname}", final

    async def _send(self, path: str, options: RequestOptions | None) -> tuple[str, Outcome]:
        url, final = await self.prepare(path, options or RequestOptions())
        response = await send(self._transport, url, final)
        log.debug(
            "request_dispatched",
            url=url,
            method=final.method,
            status=response.status_code,
            credentials=final.credentials,
            mode=final.mode,
        )
        return url, classify_response(response)

    async def dispatch(self, path: str, options: RequestOptions | None = None) -> Outcome:
        """Issue the request and return its classification without raising on status."""
        _, outcome = await self._send(path, options)
        return outcome

    async def request(self, path: str, options: RequestOptions | None = None) -> Any:
        """Issue the request; return the JSON payload or raise HttpStatusError."""
        url, outcome = await self._send(path, options)
        return unwrap(outcome, url)
