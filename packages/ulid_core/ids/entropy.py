"""Monotonic randomness source for ULID generation.

Each call for a new millisecond draws fresh 80-bit randomness from a
cryptographically secure source. Repeated calls within the same millisecond
increment the previous value instead, so IDs from one generator sort strictly
in generation order.
"""

from __future__ import annotations

import secrets
import threading
from enum import Enum
from typing import Callable

from packages.ulid_core.errors import EntropyOverflow
from packages.ulid_core.ids.constants import RANDOM_BYTES_LENGTH, RANDOM_MAX

RandomBytes = Callable[[int], bytes]


class ClockRegressionPolicy(str, Enum):
    """How the generator reacts to a timestamp older than the last one seen."""

    RESEED = "reseed"
    HOLD = "hold"


class EntropyGenerator:
    """Produce monotonic 80-bit randomness per millisecond.

    ``(last_timestamp, last_randomness)`` is the only mutable state and every
    read-modify-write happens under one lock, so concurrent callers sharing an
    instance still observe strictly increasing values.

    With ``ClockRegressionPolicy.RESEED`` any timestamp that differs from the
    last one draws fresh randomness. With ``ClockRegressionPolicy.HOLD`` a
    timestamp older than the last one is replaced by the last one and the
    counter keeps incrementing.
    """

    def __init__(
        self,
        random_bytes: RandomBytes | None = None,
        *,
        clock_regression: ClockRegressionPolicy = ClockRegressionPolicy.RESEED,
    ) -> None:
        self._random_bytes = random_bytes or secrets.token_bytes
        self._clock_regression = ClockRegressionPolicy(clock_regression)
        self._lock = threading.Lock()
        self._last_timestamp: int | None = None
        self._last_randomness = 0

    @property
    def clock_regression(self) -> ClockRegressionPolicy:
        return self._clock_regression

    @property
    def last_timestamp(self) -> int | None:
        return self._last_timestamp

    @property
    def last_randomness(self) -> int:
        return self._last_randomness

    def next(self, timestamp: int) -> int:
        """Return randomness for ``timestamp``, incrementing within a millisecond."""
        return self.reserve(timestamp)[1]

    def reserve(self, timestamp: int) -> tuple[int, int]:
        """Return the effective ``(timestamp, randomness)`` pair for one ULID.

        The effective timestamp differs from the input only under the ``HOLD``
        policy when the clock moved backwards.
        """
        with self._lock:
            last = self._last_timestamp
            if last is not None and self._clock_regression is ClockRegressionPolicy.HOLD:
                timestamp = max(timestamp, last)

            if timestamp == last:
                if self._last_randomness >= RANDOM_MAX:
                    raise EntropyOverflow(timestamp)
                self._last_randomness += 1
            else:
                self._last_timestamp = timestamp
                self._last_randomness = self._draw()
            return timestamp, self._last_randomness

    def seed(self, timestamp: int, randomness: int) -> None:
        """Force the stored state so generation continues after a known ULID."""
        if not 0 <= randomness <= RANDOM_MAX:
            raise ValueError("randomness out of ULID 80-bit range")
        with self._lock:
            self._last_timestamp = timestamp
            self._last_randomness = randomness

    def _draw(self) -> int:
        data = self._random_bytes(RANDOM_BYTES_LENGTH)
        if len(data) != RANDOM_BYTES_LENGTH:
            raise ValueError(
                f"entropy source returned {len(data)} bytes, expected {RANDOM_BYTES_LENGTH}"
            )
        return int.from_bytes(data, byteorder="big", signed=False)
