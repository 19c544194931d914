"""
config.py — pydantic-settings Settings class.

All environment variables for regional_http are declared here. Components
never read `settings` on their own; it is only the default used by
build_http_service() and the CLI.

Usage:
    from regional_http.config import settings
    print(settings.origin)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from regional_http.constants import CROSS_REGION_FLAG, ONE_HOUR_IN_SECONDS


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------
    origin: str = Field(default="http://localhost:8088")
    domains_path: str = Field(default="/api/domains")
    feature_flags_path: str = Field(default="/api/feature-flags")
    cross_region_flag: str = Field(default=CROSS_REGION_FLAG)

    # -------------------------------------------------------------------------
    # Caching / transport
    # -------------------------------------------------------------------------
    domain_cache_ttl_seconds: float = Field(default=ONE_HOUR_IN_SECONDS, gt=0)
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    @field_validator("origin", "domains_path", "feature_flags_path", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level default — the CLI and build_http_service() fall back to this
# ---------------------------------------------------------------------------
settings = Settings()
