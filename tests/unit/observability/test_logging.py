"""Tests for observability/logging.py."""

from __future__ import annotations

import io
import json
import logging

import pytest
import structlog
from structlog.contextvars import get_contextvars

from hiring_pipeline_agents.observability.logging import (
    _resolve_level,
    bind_application_context,
    clear_application_context,
    configure_logging,
    mask_email,
    mask_phone,
    redact_pii,
)
from tests.mocks.mock_settings import make_settings


def _capture_json_logs() -> io.StringIO:
    """Configure JSON logging and redirect the root handler to a buffer."""
    configure_logging(make_settings(log_format="json", log_level="INFO"))
    stream = io.StringIO()
    logging.getLogger().handlers[0].setStream(stream)  # type: ignore[attr-defined]
    return stream


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_mode_renders_json(self) -> None:
        """JSON mode emits one JSON object per line."""
        stream = _capture_json_logs()
        structlog.get_logger("test").info("application_created", role="sdet-jr")

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "application_created"
        assert record["role"] == "sdet-jr"
        assert record["level"] == "info"

    def test_sets_level_and_quiets_libraries(self) -> None:
        """Root level is applied and HTTP client loggers stay at WARNING or above."""
        configure_logging(make_settings(log_level="DEBUG"))
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_bound_context_and_redaction_in_output(self) -> None:
        """Bound application_id appears and candidate PII is masked."""
        stream = _capture_json_logs()
        bind_application_context("app-1")
        structlog.get_logger("test").info(
            "challenge_email_sent", to="maria.silva@example.com", phone="(11) 98765-4321"
        )
        clear_application_context()

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["application_id"] == "app-1"
        assert record["to"] == "m***@example.com"
        assert record["phone"] == "***4321"


@pytest.mark.unit
class TestApplicationContext:
    """Tests for bind/clear application context."""

    def test_bind_and_clear(self) -> None:
        """Binding sets contextvars and clearing removes them."""
        bind_application_context("app-1", role="sdet-jr")
        assert get_contextvars() == {"application_id": "app-1", "role": "sdet-jr"}
        clear_application_context()
        assert get_contextvars() == {}


@pytest.mark.unit
class TestRedaction:
    """Tests for PII masking helpers."""

    def test_mask_email(self) -> None:
        """Only the first local character and the domain survive."""
        assert mask_email("maria@example.com") == "m***@example.com"
        assert mask_email("not-an-email") == "***"

    def test_mask_phone(self) -> None:
        """Only the last four digits survive."""
        assert mask_phone("+55 (11) 98765-4321") == "***4321"
        assert mask_phone("") == "***"

    def test_redact_pii_leaves_other_keys(self) -> None:
        """Non-PII keys and non-string values are untouched."""
        event = {"event": "x", "email": "a@b.co", "role": "sdet-jr", "phone": None}
        assert redact_pii(None, "info", event) == {
            "event": "x",
            "email": "a***@b.co",
            "role": "sdet-jr",
            "phone": None,
        }


@pytest.mark.unit
class TestResolveLevel:
    """Tests for _resolve_level."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("debug", logging.DEBUG),
            ("unknown", logging.INFO),
        ],
    )
    def test_resolve_level(self, name: str, expected: int) -> None:
        """Level names resolve to correct logging constants."""
        assert _resolve_level(name) == expected
