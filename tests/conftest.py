"""Shared fixtures."""

from __future__ import annotations

import pytest

from redefynn_gate import (
    BufferedSecurityEventSink,
    GateConfig,
    InMemoryNotificationSink,
    RateLimiter,
    SecurityEventLogger,
    SecurityGate,
)
from redefynn_gate.backend import InMemoryAuthClient, InMemoryPersistenceClient

VALID_APPLICATION = {
    "name": "Dr. Jane Doe",
    "age": 42,
    "address": "12 Harbour Street, Sydney NSW 2000",
    "annual_income": "$250,000",
    "job_description": "General dentist running a two-chair practice.",
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def event_sink() -> BufferedSecurityEventSink:
    return BufferedSecurityEventSink()


@pytest.fixture
def notifier() -> InMemoryNotificationSink:
    return InMemoryNotificationSink()


@pytest.fixture
def auth() -> InMemoryAuthClient:
    return InMemoryAuthClient()


@pytest.fixture
def persistence() -> InMemoryPersistenceClient:
    return InMemoryPersistenceClient()


@pytest.fixture
def gate(
    auth: InMemoryAuthClient,
    persistence: InMemoryPersistenceClient,
    clock: FakeClock,
    event_sink: BufferedSecurityEventSink,
    notifier: InMemoryNotificationSink,
) -> SecurityGate:
    return SecurityGate(
        auth=auth,
        persistence=persistence,
        config=GateConfig(),
        rate_limiter=RateLimiter(clock=clock),
        events=SecurityEventLogger(sink=event_sink),
        notifier=notifier,
    )
