"""Time sources for the session state machine."""

from __future__ import annotations

import time
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can report the current time in milliseconds."""

    def now_ms(self) -> int:
        ...


class SystemClock:
    """Wall clock in epoch milliseconds that never runs backwards."""

    def __init__(self) -> None:
        self._last: Optional[int] = None

    def now_ms(self) -> int:
        current = int(time.time() * 1000)
        if self._last is not None and current < self._last:
            current = self._last
        self._last = current
        return current


class ManualClock:
    """Clock driven explicitly by tests and scripted replays."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = int(start_ms)

    def now_ms(self) -> int:
        return self._now

    def set(self, value_ms: int) -> None:
        """Move the clock to ``value_ms``; earlier values are ignored."""
        self._now = max(self._now, int(value_ms))

    def advance(self, delta_ms: int) -> int:
        self._now += max(0, int(delta_ms))
        return self._now
