"""
quick_api.tier0_core.logging
─────────────────────────────
Structured logs for outbound calls, with levels and redaction of
sensitive fields.

Loggers are private structlog wrappers around stdlib loggers under the
``quick_api`` namespace. The global structlog configuration of the host
application is never touched, and ``quick_api`` records do not propagate
to the root logger.

Minimal stack: structlog (stdout JSON or console)
Configure via: QUICK_API_LOG_LEVEL, QUICK_API_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import sys
import threading
from typing import Any

import structlog

from quick_api.tier0_core.config import get_config

_ROOT = "quick_api"


# ── Configuration ─────────────────────────────────────────────────────────────

def _processors() -> list[Any]:
    if get_config().log_format == "console":
        renderer: Any = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    return [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _redact_processor,
        renderer,
    ]


def _configure_library_logger() -> None:
    log_level = get_config().log_level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    library_logger = logging.getLogger(_ROOT)
    library_logger.addHandler(handler)
    library_logger.setLevel(getattr(logging, log_level, logging.WARNING))
    library_logger.propagate = False


# ── Redaction processor ───────────────────────────────────────────────────────

_REDACT_KEYS = frozenset({
    "password", "passwd", "secret", "token", "api_key", "apikey",
    "authorization", "auth", "credential", "private_key", "access_token",
    "refresh_token", "client_secret", "cookie", "x-api-key",
})

_REDACTED = "[REDACTED]"


def _redact_processor(
    logger: Any, method: str, event_dict: dict
) -> dict:
    """Strip sensitive fields from log records before output."""
    for key in list(event_dict.keys()):
        if key.lower() in _REDACT_KEYS:
            event_dict[key] = _REDACTED
    return event_dict


# ── Public API ────────────────────────────────────────────────────────────────

_configured = False
_configure_lock = threading.Lock()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name.

    Usage:
        log = get_logger(__name__)
        log.debug("request.completed", method="GET", status=200)
    """
    global _configured
    if not _configured:
        with _configure_lock:
            if not _configured:
                _configure_library_logger()
                _configured = True

    name = name or _ROOT
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
