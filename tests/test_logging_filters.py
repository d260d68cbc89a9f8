"""Tests for request correlation and redaction of candidate data in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.config import LogSettings
from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    redact,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger("test_chat_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_redacts_secrets(capture):
    logger, stream = capture

    logger.info("llm_call", extra={"api_key": "sk-secret-123", "x-api-key": "another-secret"})

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output


def test_redacts_candidate_data(capture):
    logger, stream = capture

    logger.info(
        "chat_event",
        extra={
            "resume_text": "Jane Doe, jane@example.com, Python engineer",
            "candidate_name": "Jane Doe",
            "query": "Is Jane Doe a good fit?",
            "evidence_count": 3,
        },
    )

    payload = json.loads(stream.getvalue())
    assert "Jane" not in stream.getvalue()
    assert payload["resume_text"] == "[REDACTED]"
    assert payload["evidence_count"] == 3


def test_safe_fields_pass_through(capture):
    logger, stream = capture

    logger.info(
        "chat.intent_classified",
        extra={"intent": "evaluation_challenge", "confidence": 0.8},
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "chat.intent_classified"
    assert payload["intent"] == "evaluation_challenge"
    assert payload["confidence"] == 0.8
    assert "[REDACTED]" not in stream.getvalue()


def test_nested_values_are_redacted():
    value = {"headers": {"Authorization": "Bearer x", "user-agent": "pytest"}, "items": [{"token": "t"}]}

    assert redact(value) == {
        "headers": {"Authorization": "[REDACTED]", "user-agent": "pytest"},
        "items": [{"token": "[REDACTED]"}],
    }


def test_request_id_from_context(capture):
    logger, stream = capture
    set_request_id("req-abc")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-abc"


def test_configure_logging_installs_single_handler():
    configure_logging(LogSettings(level="DEBUG", format="plain"))

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    configure_logging(LogSettings())
    assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)
