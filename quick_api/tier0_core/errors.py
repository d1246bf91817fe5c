"""
quick_api.tier0_core.errors
────────────────────────────
Error taxonomy for programming and setup mistakes. HTTP error statuses and
transport failures are *not* exceptions: they come back as result values
(see quick_api.tier0_core.http). Only problems a caller must fix in code
(bad client setup, bad resource definitions, payloads that fail a model
contract) are raised.
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class QuickApiError(Exception):
    """
    Base class for all quick_api errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: short human readable summary
    - detail: internal context, defaults to user_message
    """

    code: str = "quick_api_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "An unexpected error occurred.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


# ── Typed error classes ───────────────────────────────────────────────────────

class ConfigurationError(QuickApiError):
    """Client misconfiguration detected at construction time."""
    code = "configuration_error"


class ResourceDefinitionError(QuickApiError):
    """A resource declaration is missing required fields or names unknown operations."""
    code = "resource_definition_error"


class ValidationError(QuickApiError):
    """Payload does not satisfy the model it was parsed into."""
    code = "validation_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Validation failed.",
        fields: dict | None = None,
        **metadata: Any,
    ) -> None:
        self.fields = fields or {}
        super().__init__(code, user_message, **metadata)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


__all__ = [
    "QuickApiError",
    "ConfigurationError",
    "ResourceDefinitionError",
    "ValidationError",
]
