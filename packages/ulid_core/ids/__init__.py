"""ULID primitives: codec, value type, and monotonic generation."""

from packages.ulid_core.ids.codec import decode_time, encode, normalize, validate
from packages.ulid_core.ids.constants import (
    ENCODING,
    RANDOM_MAX,
    TIME_MAX,
    ULID_BYTES_LENGTH,
    ULID_LENGTH,
)
from packages.ulid_core.ids.entropy import ClockRegressionPolicy, EntropyGenerator
from packages.ulid_core.ids.generator import UlidGenerator
from packages.ulid_core.ids.time_source import TimeSource, system_clock_ms
from packages.ulid_core.ids.ulid import (
    Ulid,
    decode,
    require_ulid_bytes,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)

is_valid = validate

__all__ = [
    "ENCODING",
    "RANDOM_MAX",
    "TIME_MAX",
    "ULID_BYTES_LENGTH",
    "ULID_LENGTH",
    "ClockRegressionPolicy",
    "EntropyGenerator",
    "TimeSource",
    "Ulid",
    "UlidGenerator",
    "decode",
    "decode_time",
    "encode",
    "is_valid",
    "normalize",
    "require_ulid_bytes",
    "system_clock_ms",
    "ulid_bytes_to_str",
    "ulid_str_to_bytes",
    "validate",
]
