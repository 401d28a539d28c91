"""
Unit tests for the structured logging processors.
"""

import pytest

from shared.logging import (
    add_correlation_context,
    add_service_context,
    add_trace_context,
    clear_context,
    set_api_key_context,
    set_request_id,
)


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestCorrelationContext:
    """Request correlation carried through context variables."""

    def test_request_id_and_masked_key_are_added(self):
        set_request_id("req-123")
        set_api_key_context("abcd...wxyz")

        event = add_correlation_context(None, "info", {"event": "HTTP request"})

        assert event["request_id"] == "req-123"
        assert event["api_key"] == "abcd...wxyz"

    def test_explicit_fields_win(self):
        set_api_key_context("abcd...wxyz")

        event = add_correlation_context(None, "warning", {"event": "Invalid API key", "api_key": "***"})

        assert event["api_key"] == "***"

    def test_generated_request_id(self):
        request_id = set_request_id()

        assert len(request_id) == 36
        assert add_correlation_context(None, "info", {})["request_id"] == request_id

    def test_cleared_context_adds_nothing(self):
        set_request_id("req-123")
        set_api_key_context("abcd...wxyz")
        clear_context()

        assert add_correlation_context(None, "info", {}) == {}


class TestServiceContext:
    """Service name derived from the logger name."""

    @pytest.mark.parametrize(
        "logger_name,service",
        [("gateway.rate_limiter", "gateway"), ("steam_client", "steam_client"), ("", "unknown")],
    )
    def test_service_name(self, logger_name, service):
        assert add_service_context(None, "info", {"logger": logger_name})["service"] == service


def test_no_trace_ids_without_a_recording_span():
    event = add_trace_context(None, "info", {"event": "x"})

    assert "trace_id" not in event
    assert "span_id" not in event
