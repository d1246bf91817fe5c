"""
quick_api.tier0_core.config
─────────────────────────────
Typed client defaults with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic. Anything set explicitly on a
Client or per call takes precedence over these values.

Minimal stack: pydantic-settings + python-dotenv
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QuickApiConfig(BaseSettings):
    """
    Process-wide defaults for every Client. All env vars are prefixed with
    QUICK_API_.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Transport ─────────────────────────────────────────────────────────────
    api_host: str | None = Field(default=None, alias="QUICK_API_HOST")
    timeout: float = Field(default=30.0, alias="QUICK_API_TIMEOUT")
    follow_redirects: bool = Field(default=False, alias="QUICK_API_FOLLOW_REDIRECTS")
    verify_ssl: bool = Field(default=True, alias="QUICK_API_VERIFY_SSL")

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="WARNING", alias="QUICK_API_LOG_LEVEL")
    log_format: str = Field(default="json", alias="QUICK_API_LOG_FORMAT")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v!r}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "console"}
        if v.lower() not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got {v!r}")
        return v.lower()

    def transport_options(self) -> dict[str, Any]:
        """Keyword arguments handed to ``httpx.Client`` for every call."""
        return {
            "timeout": self.timeout,
            "follow_redirects": self.follow_redirects,
            "verify": self.verify_ssl,
        }


@lru_cache(maxsize=1)
def get_config() -> QuickApiConfig:
    """
    Return the singleton config. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.
    """
    return QuickApiConfig()


def _reset_config() -> None:
    """For tests: clear the config cache."""
    get_config.cache_clear()
