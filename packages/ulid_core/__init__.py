"""Lexicographically sortable identifiers with monotonic generation."""

from packages.ulid_core.errors import (
    EntropyOverflow,
    InvalidSeedTime,
    MalformedUlid,
    UlidError,
)
from packages.ulid_core.ids import (
    ClockRegressionPolicy,
    Ulid,
    UlidGenerator,
    decode,
    decode_time,
    encode,
    is_valid,
)
from packages.ulid_core.service import UlidService, build_ulid_service

__all__ = [
    "ClockRegressionPolicy",
    "EntropyOverflow",
    "InvalidSeedTime",
    "MalformedUlid",
    "Ulid",
    "UlidError",
    "UlidGenerator",
    "UlidService",
    "build_ulid_service",
    "decode",
    "decode_time",
    "encode",
    "is_valid",
]
