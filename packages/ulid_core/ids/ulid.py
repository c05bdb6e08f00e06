"""ULID value type and binary conversion helpers.

This module standardizes canonical big-endian ULID handling. The binary form is
16 bytes: the high 48 bits hold the millisecond timestamp and the low 80 bits
hold randomness. The canonical string form is 26 Crockford Base32 characters.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from packages.ulid_core.errors import MalformedUlid
from packages.ulid_core.ids import codec
from packages.ulid_core.ids.constants import (
    RANDOM_BITS,
    RANDOM_MAX,
    TIME_MAX,
    ULID_BYTES_LENGTH,
    ULID_MAX,
)


@dataclass(frozen=True, order=True)
class Ulid:
    """Immutable 128-bit ULID split into timestamp and randomness."""

    timestamp: int
    randomness: int

    def __post_init__(self) -> None:
        if not 0 <= self.timestamp <= TIME_MAX:
            raise ValueError("timestamp out of ULID 48-bit range")
        if not 0 <= self.randomness <= RANDOM_MAX:
            raise ValueError("randomness out of ULID 80-bit range")

    def __str__(self) -> str:
        return codec.encode(self.timestamp, self.randomness)

    def as_datetime(self) -> datetime:
        """Return the timestamp component as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=UTC)

    def to_int(self) -> int:
        return (self.timestamp << RANDOM_BITS) | self.randomness

    def to_bytes(self) -> bytes:
        """Return canonical 16-byte big-endian binary."""
        return self.to_int().to_bytes(ULID_BYTES_LENGTH, byteorder="big", signed=False)

    @classmethod
    def from_int(cls, value: int) -> Ulid:
        if value < 0 or value > ULID_MAX:
            raise MalformedUlid("ULID value exceeds 128-bit range")
        return cls(timestamp=value >> RANDOM_BITS, randomness=value & RANDOM_MAX)

    @classmethod
    def from_bytes(cls, value: bytes) -> Ulid:
        data = require_ulid_bytes(value)
        return cls.from_int(int.from_bytes(data, byteorder="big", signed=False))

    @classmethod
    def parse(cls, text: str) -> Ulid:
        """Decode a 26-char ULID string, accepting lowercase symbols."""
        return cls.from_int(codec.decode_int(text))


def decode(text: str) -> Ulid:
    """Decode both components of a canonical ULID string."""
    return Ulid.parse(text)


def ulid_str_to_bytes(value: str) -> bytes:
    """Decode canonical 26-char ULID string into 16-byte big-endian form."""
    return Ulid.parse(value).to_bytes()


def ulid_bytes_to_str(value: bytes) -> str:
    """Encode 16-byte big-endian ULID into canonical 26-char Base32 string."""
    return str(Ulid.from_bytes(value))


def require_ulid_bytes(value: object, *, field_name: str = "id") -> bytes:
    """Validate and normalize a value as canonical 16-byte ULID binary."""
    if isinstance(value, (bytes, bytearray, memoryview)) and len(value) == ULID_BYTES_LENGTH:
        return bytes(value)
    raise MalformedUlid(f"{field_name} must be {ULID_BYTES_LENGTH}-byte ULID binary")
