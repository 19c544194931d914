"""
constants.py — Fixed values shared across regional_http.
"""

from __future__ import annotations

from typing import Literal

ONE_HOUR_IN_SECONDS: float = 60 * 60

ActiveStatus = Literal["active", "passive"]
ACTIVE_STATUSES: tuple[str, ...] = ("active", "passive")

CredentialsMode = Literal["omit", "same-origin", "include"]
CorsMode = Literal["same-origin", "cors", "no-cors"]

DEFAULT_CREDENTIALS: CredentialsMode = "same-origin"
DEFAULT_MODE: CorsMode = "cors"

# Browser fetch semantics: a cross-region call opts into cookies + CORS
CROSS_REGION_CREDENTIALS: CredentialsMode = "include"
CROSS_REGION_MODE: CorsMode = "cors"

DEFAULT_HEADERS: dict[str, str] = {
    "Accepts": "application/json",
}
JSON_CONTENT_TYPE = "application/json"

# Verbs that carry a JSON body and therefore get a Content-Type header
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})

# Feature flag mapping a cluster name to its regional base URL
CROSS_REGION_FLAG = "crossRegion.clusterToRegionalDomainUrl"
