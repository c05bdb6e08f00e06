"""Exception hierarchy raised by ULID generation and decoding."""

from __future__ import annotations

from . import codes


class UlidError(Exception):
    """Base class for every error raised by ulid-core."""

    code: str = codes.INTERNAL_ERROR


class InvalidSeedTime(UlidError, ValueError):
    """Caller-supplied seed time is not an integer in the 48-bit range."""

    code = codes.INVALID_SEED_TIME

    def __init__(self, seed_time: object) -> None:
        super().__init__(
            f"seed time must be an integer in [0, 2**48 - 1], got {seed_time!r}"
        )
        self.seed_time = seed_time


class EntropyOverflow(UlidError, OverflowError):
    """Randomness space exhausted within a single millisecond."""

    code = codes.ENTROPY_OVERFLOW

    def __init__(self, timestamp: int) -> None:
        super().__init__(
            f"randomness exhausted for timestamp {timestamp}; retry in the next millisecond"
        )
        self.timestamp = timestamp


class MalformedUlid(UlidError, ValueError):
    """Input text or bytes are not a structurally valid ULID."""

    code = codes.MALFORMED_ULID
