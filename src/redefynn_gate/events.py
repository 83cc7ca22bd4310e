"""Security event logging."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

import structlog

from .models import SecurityEvent

logger = structlog.get_logger(__name__)


class SecurityEventType(StrEnum):
    """Well-known security event names."""

    USER_SIGNIN = "user_signin"
    USER_SIGNUP = "user_signup"
    USER_SIGNOUT = "user_signout"
    PASSWORD_RESET_REQUEST = "password_reset_request"
    PASSWORD_UPDATED = "password_updated"
    INVALID_SESSION = "invalid_session"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_SUBMISSION_FAILED = "application_submission_failed"
    AUTH_FAILED = "auth_failed"
    ADMIN_ACTION = "admin_action"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    VALIDATION_ERROR = "validation_error"
    UNAUTHORIZED_ACCESS = "unauthorized_access"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    APPLICATIONS_FETCH_FAILED = "applications_fetch_failed"
    APPLICATION_STATS_FETCH_FAILED = "application_stats_fetch_failed"
    CSP_VIOLATION = "csp_violation"


class SecurityEventSink(ABC):
    """Destination for security events."""

    @abstractmethod
    def emit(self, event: SecurityEvent) -> None: ...


class StructlogSecurityEventSink(SecurityEventSink):
    """Writes events to the structlog pipeline."""

    def __init__(self, log: Any = None) -> None:
        self._log = log if log is not None else structlog.get_logger("security")

    def emit(self, event: SecurityEvent) -> None:
        self._log.info(
            f"[SECURITY] {event.event_name}",
            security_event=event.event_name,
            event_timestamp=event.timestamp,
            details=event.details,
        )


class BufferedSecurityEventSink(SecurityEventSink):
    """Keeps events in memory."""

    def __init__(self) -> None:
        self._buffer: list[SecurityEvent] = []

    @property
    def events(self) -> list[SecurityEvent]:
        return list(self._buffer)

    def names(self) -> list[str]:
        return [e.event_name for e in self._buffer]

    def emit(self, event: SecurityEvent) -> None:
        self._buffer.append(event)

    def flush(self) -> list[SecurityEvent]:
        result = list(self._buffer)
        self._buffer.clear()
        return result


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SecurityEventLogger:
    """Builds timestamped events and hands them to a sink.

    Fire-and-forget: a failing sink is reported on the regular log and the
    caller carries on.
    """

    def __init__(
        self,
        sink: SecurityEventSink | None = None,
        enabled: bool = True,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink if sink is not None else StructlogSecurityEventSink()
        self._enabled = enabled
        self._now = now

    def log(self, event_name: str, details: dict[str, Any] | None = None) -> SecurityEvent:
        event = SecurityEvent(
            event_name=str(event_name),
            timestamp=self._now().isoformat(),
            details=dict(details or {}),
        )
        if not self._enabled:
            return event
        try:
            self._sink.emit(event)
        except Exception:
            logger.warning("security event sink failed", security_event=event.event_name, exc_info=True)
        return event
