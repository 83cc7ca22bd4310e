"""Session inactivity monitoring."""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from .config import SessionSection
from .events import SecurityEventLogger, SecurityEventType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SecurityStatus:
    """Snapshot of the monitored session."""

    session_active: bool
    last_activity: float
    session_time_remaining: float


class SessionMonitor:
    """Warns before and reports at session expiry.

    The session expires ``timeout_secs`` after the last recorded activity; a
    warning event fires once ``warning_lead_secs`` before that. ``start`` polls
    ``check`` on an asyncio task; tests drive ``check`` directly with a fake
    clock.
    """

    def __init__(
        self,
        config: SessionSection,
        events: SecurityEventLogger,
        clock: Callable[[], float] = time.monotonic,
        on_timeout: Callable[[], Any] | None = None,
    ) -> None:
        self._config = config
        self._events = events
        self._clock = clock
        self._on_timeout = on_timeout
        self._last_activity = clock()
        self._warning_shown = False
        self._expired = False
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        """Begin polling. Must be called from a running event loop."""
        if self.running:
            return
        self.record_activity()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Stop polling."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        # runs until stop(); record_activity() re-arms an expired session
        while True:
            self.check()
            await asyncio.sleep(self._config.poll_interval_secs)

    def record_activity(self) -> None:
        self._last_activity = self._clock()
        self._warning_shown = False
        self._expired = False

    def refresh_session(self) -> None:
        self.record_activity()
        self._events.log(SecurityEventType.USER_SIGNIN, {"type": "session_refreshed"})

    def check(self) -> None:
        """Emit the warning or timeout event when due."""
        if self._expired:
            return
        remaining = self._config.timeout_secs - (self._clock() - self._last_activity)

        if remaining <= 0:
            self._expired = True
            self._events.log(SecurityEventType.INVALID_SESSION, {"reason": "session_timeout"})
            if self._on_timeout is not None:
                try:
                    self._on_timeout()
                except Exception:
                    logger.exception("session timeout callback failed")
            return

        if remaining <= self._config.warning_lead_secs and not self._warning_shown:
            self._warning_shown = True
            self._events.log(
                SecurityEventType.INVALID_SESSION,
                {"reason": "session_warning_shown", "remaining_secs": remaining},
            )

    def get_security_status(self) -> SecurityStatus:
        elapsed = self._clock() - self._last_activity
        return SecurityStatus(
            session_active=elapsed < self._config.inactivity_timeout_secs,
            last_activity=self._last_activity,
            session_time_remaining=max(0.0, self._config.timeout_secs - elapsed),
        )
