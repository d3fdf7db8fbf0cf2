"""Correlation id allocation for outstanding requests."""

from __future__ import annotations

import time
from collections.abc import Callable, Container

ClockMs = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class CorrelationIds:
    """Timestamp-derived ids, strictly increasing per channel.

    Two requests issued in the same millisecond get consecutive ids instead of
    spinning until the clock ticks.
    """

    def __init__(self, clock_ms: ClockMs | None = None) -> None:
        self._clock_ms = clock_ms or wall_clock_ms
        self._last = 0

    def next(self, pending: Container[int]) -> int:
        candidate = max(int(self._clock_ms()), self._last + 1)
        while candidate in pending:
            candidate += 1
        self._last = candidate
        return candidate


__all__ = ["ClockMs", "CorrelationIds", "wall_clock_ms"]
