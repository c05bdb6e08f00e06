"""ULID generation composed from a time source, entropy, and the codec."""

from __future__ import annotations

from packages.ulid_core.ids import codec
from packages.ulid_core.ids.entropy import (
    ClockRegressionPolicy,
    EntropyGenerator,
    RandomBytes,
)
from packages.ulid_core.ids.time_source import Clock, TimeSource
from packages.ulid_core.ids.ulid import Ulid


class UlidGenerator:
    """Caller-owned ULID generator with its own monotonic state.

    Clock and entropy sources are constructor dependencies so tests can drive
    generation deterministically. Instances are safe to share across threads.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        random_bytes: RandomBytes | None = None,
        clock_regression: ClockRegressionPolicy = ClockRegressionPolicy.RESEED,
    ) -> None:
        self.time_source = TimeSource(clock)
        self.entropy = EntropyGenerator(random_bytes, clock_regression=clock_regression)

    def new(self, seed_time: int | None = None) -> Ulid:
        """Generate one ULID value, optionally stamped with ``seed_time``."""
        timestamp = self.time_source.resolve(seed_time)
        timestamp, randomness = self.entropy.reserve(timestamp)
        return Ulid(timestamp=timestamp, randomness=randomness)

    def generate(self, seed_time: int | None = None) -> str:
        """Generate one ULID in canonical 26-char string format."""
        value = self.new(seed_time)
        return codec.encode(value.timestamp, value.randomness)

    def generate_bytes(self, seed_time: int | None = None) -> bytes:
        """Generate one ULID as canonical 16-byte big-endian binary."""
        return self.new(seed_time).to_bytes()
