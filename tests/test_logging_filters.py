"""Tests for sensitive data filtering and JSON log formatting."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    redact,
    set_request_id,
)


@pytest.fixture
def capture_logger():
    """Logger writing JSON lines to an in-memory stream."""

    logger = logging.getLogger("test_sightings_logging")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_sensitive_filter_redacts_client_addresses(capture_logger):
    logger, stream = capture_logger

    logger.info(
        "rate_limit.allowed",
        extra={
            "client_ip": "203.0.113.9",
            "x-forwarded-for": "198.51.100.7, 10.0.0.1",
            "key_hash": "abc123",
        },
    )

    output = stream.getvalue()
    assert "203.0.113.9" not in output
    assert "198.51.100.7" not in output
    assert "[REDACTED]" in output
    assert "abc123" in output


def test_sensitive_filter_redacts_nested_headers(capture_logger):
    logger, stream = capture_logger

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-Real-IP": "192.0.2.44",
                "user-agent": "pytest",
            },
            "safe_data": {"count": 5},
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["headers"]["X-Real-IP"] == "[REDACTED]"
    assert payload["headers"]["user-agent"] == "pytest"
    assert payload["safe_data"] == {"count": 5}


def test_safe_fields_pass_through(capture_logger):
    logger, stream = capture_logger

    logger.info(
        "http.request",
        extra={
            "request_path": "/api/sightings",
            "status_code": 201,
            "duration_ms": 12.5,
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "http.request"
    assert payload["level"] == "info"
    assert payload["request_path"] == "/api/sightings"
    assert payload["status_code"] == 201
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context(capture_logger):
    logger, stream = capture_logger
    set_request_id("req-123")

    logger.info("sighting.created", extra={"sighting_id": 1})

    payload = json.loads(stream.getvalue())
    assert payload["request_id"] == "req-123"
    assert payload["sighting_id"] == 1


def test_exception_info_is_formatted(capture_logger):
    logger, stream = capture_logger

    try:
        raise ValueError("broken")
    except ValueError:
        logger.exception("sighting.persistence_failed")

    payload = json.loads(stream.getvalue())
    assert "ValueError: broken" in payload["exc_info"]


def test_redact_handles_sequences():
    value = [{"cookie": "session=1"}, ({"authorization": "Bearer x"},)]

    assert redact(value) == [{"cookie": "[REDACTED]"}, ({"authorization": "[REDACTED]"},)]
