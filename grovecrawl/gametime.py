"""Frame clock tracking the time between steps."""

from __future__ import annotations

import time
from collections.abc import Callable


class Clock:
    """Measures frame time; ``time_scale`` multiplies the reported delta."""

    def __init__(self, now_func: Callable[[], float] = time.perf_counter) -> None:
        self._now_func = now_func
        self.time_scale = 1.0
        self._now = 0.0
        self._last = 0.0
        self._before = 0.0
        self._duration = 0.0
        self._dt = 1.0

    def init(self) -> None:
        """Start measuring from the current moment."""
        self._last = self._now_func()
        self._before = self._last

    def step(self) -> None:
        """Advance one frame."""
        self._before = self._last
        self._now = self._now_func()
        self._duration = self._now - self._last
        self._last = self._now
        self._dt = self._duration * self.time_scale

    def delta_time(self) -> float:
        """Scaled seconds between the last two steps."""
        return self._dt

    def current_time(self) -> float:
        """Time point of the most recent step."""
        return self._now

    def last_time(self) -> float:
        """Time point of the step before the most recent one."""
        return self._before