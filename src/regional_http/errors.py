"""Exception types raised by regional_http."""

from __future__ import annotations

from typing import Any

_MISSING: Any = object()


class RegionalHttpError(Exception):
    """Base class for every error surfaced by this package."""


class TransportError(RegionalHttpError):
    """The network call itself could not complete (DNS, refused, aborted)."""

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Request to {url} failed{detail}")


class HttpStatusError(RegionalHttpError):
    """
    The transport completed but the status was outside [200, 300).

    `body` holds the parsed JSON payload when the response had one; check
    `has_body` to tell "no JSON" apart from a JSON ``null``.
    """

    def __init__(
        self,
        status: int,
        *,
        body: Any = _MISSING,
        response: Any = None,
        url: str | None = None,
    ) -> None:
        self.status = status
        self.has_body = body is not _MISSING
        self.body = body if self.has_body else None
        self.response = response
        self.url = url
        super().__init__(f"HTTP {status}" + (f" from {url}" if url else ""))
