"""
responses.py — Classification of raw transport responses.

Every response lands in exactly one terminal state:

  Success  status in [200, 300); payload is the parsed JSON body, or None
           when the body is empty / not JSON
  Failure  any other status; carries the response plus the parsed JSON body
           when there is one

unwrap() turns a Failure into HttpStatusError for callers that want the
payload or an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from regional_http.errors import HttpStatusError
from regional_http.transport import RawResponse
from regional_http.utils.logging import get_logger

log = get_logger(__name__)

_NO_BODY: Any = object()


@dataclass(frozen=True)
class Success:
    payload: Any = None


@dataclass(frozen=True)
class Failure:
    response: RawResponse
    body: Any = _NO_BODY

    @property
    def status(self) -> int:
        return self.response.status_code

    @property
    def has_body(self) -> bool:
        return self.body is not _NO_BODY

    def to_error(self, url: str | None = None) -> HttpStatusError:
        if self.has_body:
            return HttpStatusError(self.status, body=self.body, response=self.response, url=url)
        return HttpStatusError(self.status, response=self.response, url=url)


Outcome = Success | Failure


def _parse_json(response: RawResponse) -> Any:
    try:
        return response.json()
    except (ValueError, UnicodeDecodeError):
        # json.JSONDecodeError is a ValueError
        return _NO_BODY


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def classify_response(response: RawResponse) -> Outcome:
    body = _parse_json(response)
    if is_success_status(response.status_code):
        return Success(None if body is _NO_BODY else body)
    return Failure(response, body)


def unwrap(outcome: Outcome, url: str | None = None) -> Any:
    """Return the Success payload or raise the Failure as HttpStatusError."""
    if isinstance(outcome, Success):
        return outcome.payload
    log.info(
        "http_status_error",
        url=url,
        status=outcome.status,
        has_body=outcome.has_body,
    )
    raise outcome.to_error(url)
