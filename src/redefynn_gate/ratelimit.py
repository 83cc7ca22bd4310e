"""Per-key attempt limiter."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from .models import RateLimitEntry, RateLimitPolicy


class RateLimiter:
    """Counts attempts per key inside a fixed window that starts at the first attempt.

    Entries are never evicted; an expired entry is overwritten on the next
    attempt for its key.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._attempts: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def is_allowed(self, key: str, max_attempts: int, window_secs: float) -> bool:
        """Record an attempt for ``key`` and report whether it is within budget.

        A denied attempt leaves the entry untouched.
        """
        with self._lock:
            now = self._clock()
            entry = self._attempts.get(key)

            if entry is None or now >= entry.reset_time:
                self._attempts[key] = RateLimitEntry(count=1, reset_time=now + window_secs)
                return True

            if entry.count < max_attempts:
                entry.count += 1
                return True

            return False

    def check(self, key: str, policy: RateLimitPolicy) -> bool:
        """``is_allowed`` driven by a policy."""
        return self.is_allowed(key, policy.max_attempts, policy.window_secs)

    def get_remaining_time(self, key: str) -> float:
        """Seconds until the window for ``key`` resets; 0 when unknown or expired."""
        with self._lock:
            entry = self._attempts.get(key)
            if entry is None:
                return 0.0
            return max(0.0, entry.reset_time - self._clock())

    def get_entry(self, key: str) -> RateLimitEntry | None:
        """Snapshot of the entry for ``key``. For testing."""
        with self._lock:
            entry = self._attempts.get(key)
            if entry is None:
                return None
            return RateLimitEntry(count=entry.count, reset_time=entry.reset_time)

    def reset(self, key: str | None = None) -> None:
        """Forget one key, or every key when ``key`` is None."""
        with self._lock:
            if key is None:
                self._attempts.clear()
            else:
                self._attempts.pop(key, None)
