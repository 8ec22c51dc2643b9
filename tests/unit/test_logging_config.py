"""Unit tests for logging configuration and redaction."""

import json
import logging

import pytest

from sso.logging_config import (
    REDACTED,
    CorrelationIdFilter,
    JsonFormatter,
    SensitiveDataFilter,
    configure_logging,
    correlation_id_var,
    sanitize_message,
)


def _record(msg: str, *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("sso.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSanitizeMessage:
    """Tests for sanitize_message."""

    def test_masks_password_assignment(self):
        assert "hunter2" not in sanitize_message("login failed password=hunter2")

    def test_masks_jwt(self):
        token = "eyJhbGciOiJIUzI1NiJ9.eyJ1aWQiOjF9.c2lnbmF0dXJl"
        assert token not in sanitize_message(f"issued {token}")

    def test_leaves_plain_messages(self):
        assert sanitize_message("user logged in successfully") == "user logged in successfully"


class TestSensitiveDataFilter:
    """Tests for SensitiveDataFilter."""

    def test_redacts_sensitive_extra_fields(self):
        record = _record("attempting to login user", password="pw123456", email="a@x.com")

        assert SensitiveDataFilter().filter(record) is True
        assert record.password == REDACTED
        assert record.email == "a@x.com"

    def test_redacts_formatted_args(self):
        record = _record("debug dump: %s", "password=pw123456")

        SensitiveDataFilter().filter(record)
        assert "pw123456" not in record.getMessage()


class TestCorrelationIdFilter:
    """Tests for CorrelationIdFilter."""

    def test_default_placeholder(self):
        record = _record("hello")
        CorrelationIdFilter().filter(record)
        assert record.correlation_id == "-"

    def test_uses_context(self):
        token = correlation_id_var.set("req-42")
        try:
            record = _record("hello")
            CorrelationIdFilter().filter(record)
        finally:
            correlation_id_var.reset(token)
        assert record.correlation_id == "req-42"


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_includes_extra_fields(self):
        record = _record("user registered", op="Authenticator.register", user_id=1)
        record.correlation_id = "req-1"

        payload = json.loads(JsonFormatter().format(record))
        assert payload["message"] == "user registered"
        assert payload["op"] == "Authenticator.register"
        assert payload["user_id"] == 1
        assert payload["correlation_id"] == "req-1"


@pytest.mark.parametrize("environment, formatter_cls", [
    ("production", JsonFormatter),
    ("development", logging.Formatter),
])
def test_configure_logging(environment, formatter_cls):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_level="WARNING", environment=environment)

        handler = root.handlers[-1]
        assert root.level == logging.WARNING
        assert isinstance(handler.formatter, formatter_cls)
        assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
