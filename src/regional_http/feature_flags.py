"""
feature_flags.py — Remote feature flag lookups.

Endpoint:
  GET {feature_flags_path}/{name}?{params}  ->  {"value": ...}

A response without a ``value`` field means "no flag" and yields None rather
than an error. That leniency is kept for compatibility with existing flag
endpoints.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from regional_http.constants import DEFAULT_CREDENTIALS, DEFAULT_HEADERS
from regional_http.models import RequestOptions
from regional_http.responses import classify_response, unwrap
from regional_http.transport import Transport, send
from regional_http.utils.logging import get_logger
from regional_http.utils.query import append_query

log = get_logger(__name__)


class FeatureFlagFetcher:
    """Reads named, optionally parameterized, flag values."""

    def __init__(self, transport: Transport, *, base_path: str = "/api/feature-flags") -> None:
        self._transport = transport
        self._base_path = base_path.rstrip("/")

    async def get_feature_flag(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        url = append_query(f"{self._base_path}/{quote(name, safe='')}", params)
        options = RequestOptions(
            method="GET",
            headers=dict(DEFAULT_HEADERS),
            credentials=DEFAULT_CREDENTIALS,
        )
        response = await send(self._transport, url, options)
        payload = unwrap(classify_response(response), url)

        if not isinstance(payload, Mapping) or "value" not in payload:
            log.debug("feature_flag_missing_value", name=name, url=url)
            return None
        return payload["value"]
