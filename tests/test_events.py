"""Security event logging unit tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from redefynn_gate import (
    BufferedSecurityEventSink,
    SecurityEvent,
    SecurityEventLogger,
    SecurityEventSink,
    SecurityEventType,
    StructlogSecurityEventSink,
)

FIXED = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_log_builds_timestamped_event() -> None:
    sink = BufferedSecurityEventSink()
    events = SecurityEventLogger(sink=sink, now=lambda: FIXED)
    event = events.log(SecurityEventType.APPLICATION_SUBMITTED, {"application_id": "a-1"})
    assert event == SecurityEvent(
        event_name="application_submitted",
        timestamp="2026-01-02T03:04:05+00:00",
        details={"application_id": "a-1"},
    )
    assert sink.events == [event]


def test_log_copies_details() -> None:
    sink = BufferedSecurityEventSink()
    details = {"k": "v"}
    SecurityEventLogger(sink=sink).log("custom", details)
    details["k"] = "changed"
    assert sink.events[0].details == {"k": "v"}


def test_disabled_logger_does_not_emit() -> None:
    sink = BufferedSecurityEventSink()
    SecurityEventLogger(sink=sink, enabled=False).log("user_signin")
    assert sink.events == []


def test_failing_sink_is_ignored() -> None:
    class Broken(SecurityEventSink):
        def emit(self, event: SecurityEvent) -> None:
            raise OSError("disk full")

    event = SecurityEventLogger(sink=Broken()).log("user_signin", {"user_id": "u"})
    assert event.event_name == "user_signin"


def test_buffered_sink_flush() -> None:
    sink = BufferedSecurityEventSink()
    events = SecurityEventLogger(sink=sink)
    events.log("a")
    events.log("b")
    assert sink.names() == ["a", "b"]
    assert [e.event_name for e in sink.flush()] == ["a", "b"]
    assert sink.events == []


def test_structlog_sink_writes_security_prefix() -> None:
    log = MagicMock()
    sink = StructlogSecurityEventSink(log=log)
    sink.emit(SecurityEvent(event_name="user_signout", timestamp="t", details={"user_id": "u"}))
    log.info.assert_called_once_with(
        "[SECURITY] user_signout",
        security_event="user_signout",
        event_timestamp="t",
        details={"user_id": "u"},
    )
