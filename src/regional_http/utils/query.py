"""
utils/query.py — Query string serialization.

Keys keep the order the caller supplied them in (dicts preserve insertion
order), never sorted:

    build_query_string({"b": "2", "a": "1"})   # "?b=2&a=1"
    build_query_string({})                     # ""
    build_query_string({"cluster": None})      # ""
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

# Characters encodeURIComponent leaves untouched
_SAFE = "-_.!~*'()"


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=_SAFE)


def build_query_string(params: Mapping[str, Any] | None) -> str:
    """Serialize *params* to ``?k=v&...``, or ``""`` when nothing is left.

    Parameters whose value is None are omitted.
    """
    if not params:
        return ""
    pairs = [
        f"{_encode(key)}={_encode(value)}"
        for key, value in params.items()
        if value is not None
    ]
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def append_query(path: str, params: Mapping[str, Any] | None) -> str:
    """Append the serialized *params* to *path*, joining with ``&`` if *path*
    already carries a query string."""
    query = build_query_string(params)
    if not query:
        return path
    if "?" in path:
        return f"{path}&{query[1:]}"
    return f"{path}{query}"
