from unittest.mock import patch

from app.shared.core.logging import add_otel_trace_id, pii_redactor


def test_pii_redactor_hides_lead_contact_details():
    event_dict = {
        "event": "lead_capture_failed",
        "email": "owner@acme.test",
        "details": {"path": "data/leads.jsonl", "api_key": "abc"},
        "error": "could not store lead for owner@acme.test",
        "processes": ["data-entry"],
    }

    redacted = pii_redactor(None, "info", event_dict)

    assert redacted["email"] == "[REDACTED]"
    assert redacted["details"]["api_key"] == "[REDACTED]"
    assert redacted["details"]["path"] == "data/leads.jsonl"
    assert "owner@acme.test" not in redacted["error"]
    assert "[EMAIL_REDACTED]" in redacted["error"]
    assert redacted["processes"] == ["data-entry"]


def test_pii_redactor_keeps_timestamps_intact():
    event_dict = {"timestamp": "2026-10-19T08:30:00.123Z", "bytes_written": 210}
    assert pii_redactor(None, "info", event_dict) == event_dict


def test_pii_redactor_redacts_phone_numbers():
    redacted = pii_redactor(None, "info", {"event": "call +1 415-555-0100 back"})
    assert "[PHONE_REDACTED]" in redacted["event"]


def test_add_otel_trace_id():
    with patch("app.shared.core.tracing.get_current_trace_id", return_value="trace-123"):
        result = add_otel_trace_id(None, "info", {"event": "test"})
    assert result["trace_id"] == "trace-123"


def test_add_otel_trace_id_without_span():
    with patch("app.shared.core.tracing.get_current_trace_id", return_value=None):
        result = add_otel_trace_id(None, "info", {"event": "test"})
    assert "trace_id" not in result
