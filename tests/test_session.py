"""SessionMonitor unit tests."""

import asyncio

from redefynn_gate import BufferedSecurityEventSink, SecurityEventLogger, SessionMonitor
from redefynn_gate.config import SessionSection

from .conftest import FakeClock


def make_monitor(
    clock: FakeClock, sink: BufferedSecurityEventSink, **kwargs: object
) -> SessionMonitor:
    config = SessionSection(timeout_secs=600, warning_lead_secs=120, inactivity_timeout_secs=300)
    return SessionMonitor(config, SecurityEventLogger(sink=sink), clock=clock, **kwargs)


def test_warning_fires_once_before_timeout(
    clock: FakeClock, event_sink: BufferedSecurityEventSink
) -> None:
    monitor = make_monitor(clock, event_sink)
    clock.advance(470)
    monitor.check()
    assert event_sink.events == []

    clock.advance(10)
    monitor.check()
    monitor.check()
    assert [e.details["reason"] for e in event_sink.events] == ["session_warning_shown"]


def test_timeout_fires_callback_once(
    clock: FakeClock, event_sink: BufferedSecurityEventSink
) -> None:
    fired: list[bool] = []
    monitor = make_monitor(clock, event_sink, on_timeout=lambda: fired.append(True))
    clock.advance(600)
    monitor.check()
    monitor.check()
    assert fired == [True]
    assert monitor.expired is True
    assert [e.details["reason"] for e in event_sink.events] == ["session_timeout"]


def test_activity_postpones_expiry(clock: FakeClock, event_sink: BufferedSecurityEventSink) -> None:
    monitor = make_monitor(clock, event_sink)
    clock.advance(500)
    monitor.check()
    monitor.record_activity()
    clock.advance(500)
    monitor.check()
    assert monitor.expired is False
    assert [e.details["reason"] for e in event_sink.events] == [
        "session_warning_shown",
        "session_warning_shown",
    ]


def test_refresh_session_logs_event(clock: FakeClock, event_sink: BufferedSecurityEventSink) -> None:
    monitor = make_monitor(clock, event_sink)
    monitor.refresh_session()
    assert event_sink.events[0].event_name == "user_signin"
    assert event_sink.events[0].details == {"type": "session_refreshed"}


def test_security_status(clock: FakeClock, event_sink: BufferedSecurityEventSink) -> None:
    monitor = make_monitor(clock, event_sink)
    status = monitor.get_security_status()
    assert status.session_active is True
    assert status.session_time_remaining == 600

    clock.advance(400)
    status = monitor.get_security_status()
    assert status.session_active is False
    assert status.session_time_remaining == 200

    clock.advance(1000)
    assert monitor.get_security_status().session_time_remaining == 0


def test_failing_timeout_callback_does_not_propagate(
    clock: FakeClock, event_sink: BufferedSecurityEventSink
) -> None:
    def boom() -> None:
        raise RuntimeError("redirect failed")

    monitor = make_monitor(clock, event_sink, on_timeout=boom)
    clock.advance(601)
    monitor.check()
    assert monitor.expired is True


async def test_start_and_stop(event_sink: BufferedSecurityEventSink) -> None:
    config = SessionSection(timeout_secs=0.05, warning_lead_secs=0, poll_interval_secs=0.01)
    monitor = SessionMonitor(config, SecurityEventLogger(sink=event_sink))
    monitor.start()
    assert monitor.running is True
    await asyncio.sleep(0.2)
    await monitor.stop()
    assert monitor.running is False
    assert monitor.expired is True
    assert event_sink.names() == ["invalid_session"]


async def test_stop_without_start_is_noop(event_sink: BufferedSecurityEventSink) -> None:
    monitor = SessionMonitor(SessionSection(), SecurityEventLogger(sink=event_sink))
    await monitor.stop()
    assert monitor.running is False


async def test_monitor_keeps_polling_after_timeout(
    clock: FakeClock, event_sink: BufferedSecurityEventSink
) -> None:
    config = SessionSection(timeout_secs=10, warning_lead_secs=0, poll_interval_secs=0.01)
    monitor = SessionMonitor(config, SecurityEventLogger(sink=event_sink), clock=clock)
    monitor.start()

    clock.advance(11)
    await asyncio.sleep(0.05)
    assert monitor.expired is True
    assert monitor.running is True

    monitor.record_activity()
    clock.advance(11)
    await asyncio.sleep(0.05)
    await monitor.stop()

    assert [e.details["reason"] for e in event_sink.events] == [
        "session_timeout",
        "session_timeout",
    ]
