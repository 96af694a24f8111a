# ./src/expiringmap/utils/clock.py
"""Clock sources and duration conversion for ExpiringMap.

Run path: imported by ``expiringmap.expiring`` and the ``replay`` CLI command.
Inputs: ``timedelta`` or numeric second durations.
Outputs: integer nanosecond readings from a monotonic source.
Side effects: none; ``ManualClock`` only mutates its own reading.
Operational notes: readings are integers so TTL boundaries compare exactly.
"""

from __future__ import annotations

import math
import time
from datetime import timedelta
from typing import Callable, Union

Clock = Callable[[], int]
DurationLike = Union[timedelta, int, float]

monotonic_ns: Clock = time.monotonic_ns

_NS_PER_US = 1_000
_NS_PER_SECOND = 1_000_000_000


def to_nanos(duration: DurationLike) -> int:
    """Convert a timedelta or a number of seconds to integer nanoseconds."""
    if isinstance(duration, bool):
        raise TypeError("duration must be a timedelta or a number of seconds")
    if isinstance(duration, timedelta):
        return (duration // timedelta(microseconds=1)) * _NS_PER_US
    if isinstance(duration, int):
        return duration * _NS_PER_SECOND
    if isinstance(duration, float):
        if not math.isfinite(duration):
            raise ValueError("duration must be finite")
        return round(duration * _NS_PER_SECOND)
    raise TypeError("duration must be a timedelta or a number of seconds")


class ManualClock:
    """Test-controlled clock; time only moves when told to."""

    def __init__(self, start: DurationLike = 0):
        self._now = to_nanos(start)

    def __call__(self) -> int:
        return self._now

    def advance(self, delta: DurationLike) -> int:
        step = to_nanos(delta)
        if step < 0:
            raise ValueError("clock cannot move backwards")
        self._now += step
        return self._now

    def set(self, at: DurationLike) -> int:
        target = to_nanos(at)
        if target < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = target
        return self._now
