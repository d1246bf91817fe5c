"""Tests for tier0_core modules."""
from __future__ import annotations

import pytest
from pydantic import BaseModel

from quick_api.tier0_core.config import QuickApiConfig, get_config
from quick_api.tier0_core.errors import (
    ConfigurationError,
    QuickApiError,
    ResourceDefinitionError,
    ValidationError,
)
from quick_api.tier0_core.http import HTTP, HttpError, NoContent, Ok, TransportFailure
from quick_api.tier0_core.logging import _REDACTED, _redact_processor, get_logger


# ── errors ─────────────────────────────────────────────────────────────────

class TestErrors:
    def test_base_error_has_code(self):
        e = QuickApiError("custom_code", user_message="Something broke")
        assert e.code == "custom_code"
        assert "Something broke" in str(e)

    def test_subclass_default_code(self):
        e = ConfigurationError(user_message="Missing host")
        assert isinstance(e, QuickApiError)
        assert e.code == "configuration_error"

    def test_detail_overrides_message_in_str(self):
        e = ResourceDefinitionError(user_message="Bad resource", detail="endpoint is empty")
        assert str(e) == "endpoint is empty"
        assert e.to_dict() == {
            "error": {"code": "resource_definition_error", "message": "Bad resource"}
        }

    def test_validation_error_with_fields(self):
        e = ValidationError(user_message="Invalid payload", fields={"id": "Field required"})
        assert e.fields == {"id": "Field required"}
        assert e.to_dict()["error"]["fields"] == {"id": "Field required"}


# ── http ───────────────────────────────────────────────────────────────────

class TestResults:
    def test_ok_carries_data(self):
        result = Ok({"item": 1})
        assert result.ok is True
        assert result.data == {"item": 1}

    def test_no_content_is_ok_without_data(self):
        result = NoContent()
        assert result.ok is True
        assert not hasattr(result, "data")

    def test_http_error_not_ok(self):
        result = HttpError(status=500, body={"error": "message"})
        assert result.ok is False
        assert result == HttpError(500, {"error": "message"})

    def test_transport_failure_equality_ignores_exception(self):
        a = TransportFailure("ConnectError", "refused", exception=RuntimeError("a"))
        b = TransportFailure("ConnectError", "refused", exception=RuntimeError("b"))
        assert a == b
        assert a.ok is False

    def test_results_are_frozen(self):
        result = Ok([1, 2])
        with pytest.raises(AttributeError):
            result.data = []  # type: ignore[misc]

    def test_parse_into_model(self):
        class Thing(BaseModel):
            id: str
            count: int

        thing = Ok({"id": "t_1", "count": 3}).parse(Thing)
        assert thing.id == "t_1"
        assert thing.count == 3

    def test_parse_mismatch_raises_validation_error(self):
        class Thing(BaseModel):
            id: str

        with pytest.raises(ValidationError) as exc_info:
            Ok({"name": "x"}).parse(Thing)
        assert "id" in exc_info.value.fields

    def test_status_constants(self):
        assert HTTP.OK == 200
        assert HTTP.NO_CONTENT == 204
        assert HTTP.INTERNAL_SERVER_ERROR == 500


# ── config ─────────────────────────────────────────────────────────────────

class TestConfig:
    def test_defaults(self):
        config = get_config()
        assert config.api_host is None
        assert config.timeout == 30.0
        assert config.follow_redirects is False

    def test_env_override(self, monkeypatch):
        from quick_api.tier0_core.config import _reset_config

        monkeypatch.setenv("QUICK_API_HOST", "https://example.com")
        monkeypatch.setenv("QUICK_API_TIMEOUT", "5")
        _reset_config()
        config = get_config()
        assert config.api_host == "https://example.com"
        assert config.timeout == 5.0

    def test_transport_options(self):
        options = QuickApiConfig(QUICK_API_TIMEOUT=2.5).transport_options()
        assert options == {"timeout": 2.5, "follow_redirects": False, "verify": True}

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            QuickApiConfig(QUICK_API_TIMEOUT=0)

    def test_rejects_unknown_log_format(self):
        with pytest.raises(ValueError):
            QuickApiConfig(QUICK_API_LOG_FORMAT="xml")


# ── logging ────────────────────────────────────────────────────────────────

class TestLogging:
    def test_redacts_sensitive_keys(self):
        event = {"event": "request.completed", "Authorization": "Bearer x", "status": 200}
        result = _redact_processor(None, "info", event)
        assert result["Authorization"] == _REDACTED
        assert result["status"] == 200

    def test_get_logger_returns_usable_logger(self):
        log = get_logger("quick_api.tests")
        log.debug("test.event", value=1)

    def test_global_structlog_config_untouched(self):
        import structlog

        import quick_api  # noqa: F401

        get_logger("quick_api.tests").warning("test.event")
        assert _redact_processor not in structlog.get_config()["processors"]

    def test_library_logger_does_not_propagate(self):
        import logging

        get_logger()
        library_logger = logging.getLogger("quick_api")
        assert library_logger.propagate is False
        assert len(library_logger.handlers) == 1

    def test_concurrent_first_use_configures_once(self, monkeypatch):
        import logging
        import threading

        import quick_api.tier0_core.logging as log_module

        library_logger = logging.getLogger("quick_api")
        monkeypatch.setattr(library_logger, "handlers", [])
        monkeypatch.setattr(log_module, "_configured", False)

        barrier = threading.Barrier(8)

        def first_use():
            barrier.wait()
            log_module.get_logger("quick_api.tests")

        threads = [threading.Thread(target=first_use) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(library_logger.handlers) == 1

    def test_foreign_names_are_namespaced(self):
        import logging

        records: list[logging.LogRecord] = []

        class Collect(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                records.append(record)

        handler = Collect()
        library_logger = logging.getLogger("quick_api")
        library_logger.addHandler(handler)
        try:
            get_logger("elsewhere").warning("test.namespaced", token="secret-value")
        finally:
            library_logger.removeHandler(handler)

        assert [r.name for r in records] == ["quick_api.elsewhere"]
        message = records[0].getMessage()
        assert "test.namespaced" in message
        assert "secret-value" not in message
