"""Millisecond clock used to stamp new ULIDs."""

from __future__ import annotations

import time
from typing import Callable

from packages.ulid_core.errors import InvalidSeedTime
from packages.ulid_core.ids.constants import TIME_MAX

Clock = Callable[[], int]


def system_clock_ms() -> int:
    """Return wall-clock milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class TimeSource:
    """Supply 48-bit millisecond timestamps from an injectable clock."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or system_clock_ms

    def now(self) -> int:
        """Return the current clock reading truncated to 48 bits."""
        return int(self._clock()) & TIME_MAX

    def resolve(self, seed_time: int | None = None) -> int:
        """Return ``seed_time`` when supplied and in range, else ``now()``."""
        if seed_time is None:
            return self.now()
        return require_seed_time(seed_time)


def require_seed_time(value: object) -> int:
    """Validate a caller-supplied seed time as an unsigned 48-bit integer."""
    # bool is an int subclass but never a meaningful timestamp.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSeedTime(value)
    if value < 0 or value > TIME_MAX:
        raise InvalidSeedTime(value)
    return value
