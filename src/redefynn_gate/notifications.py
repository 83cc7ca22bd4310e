"""User-facing notification sinks."""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from .models import Notification, NotificationVariant

logger = structlog.get_logger(__name__)


class NotificationSink(ABC):
    """Surfaces a message to the end user. Not awaited by the gate.

    ``success`` and ``failure`` never raise: a failing ``notify`` is logged
    and dropped so that it cannot undo an operation that already completed.
    """

    @abstractmethod
    def notify(self, notification: Notification) -> None: ...

    def _deliver(self, notification: Notification) -> None:
        try:
            self.notify(notification)
        except Exception:
            logger.warning(
                "notification delivery failed",
                title=notification.title,
                sink=type(self).__name__,
                exc_info=True,
            )

    def success(self, title: str, description: str) -> None:
        self._deliver(Notification(title=title, description=description))

    def failure(self, title: str, description: str) -> None:
        self._deliver(
            Notification(
                title=title,
                description=description,
                variant=NotificationVariant.DESTRUCTIVE,
            )
        )


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the log. Useful for headless deployments."""

    def notify(self, notification: Notification) -> None:
        logger.info(
            "notification",
            title=notification.title,
            description=notification.description,
            variant=str(notification.variant),
        )


class InMemoryNotificationSink(NotificationSink):
    """In-memory notification sink for testing."""

    def __init__(self) -> None:
        self._sent: list[Notification] = []

    @property
    def sent(self) -> list[Notification]:
        """Get a copy of sent notifications."""
        return list(self._sent)

    def notify(self, notification: Notification) -> None:
        self._sent.append(notification)
