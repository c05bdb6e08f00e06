"""Tests for ULID value conversions and binary ordering semantics."""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from packages.ulid_core.errors import MalformedUlid
from packages.ulid_core.ids import (
    Ulid,
    UlidGenerator,
    decode,
    require_ulid_bytes,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)
from packages.ulid_core.ids.constants import RANDOM_MAX, TIME_MAX


def test_ulid_round_trip_string_bytes_string() -> None:
    """ULID string/bytes conversion must be lossless."""
    ulid_value = UlidGenerator().generate()
    encoded = ulid_str_to_bytes(ulid_value)
    decoded = ulid_bytes_to_str(encoded)
    assert decoded == ulid_value


def test_ulid_round_trip_bytes_string_bytes() -> None:
    """ULID bytes/string conversion must be lossless."""
    ulid_value = UlidGenerator().generate_bytes()
    encoded = ulid_bytes_to_str(ulid_value)
    decoded = ulid_str_to_bytes(encoded)
    assert decoded == ulid_value


def test_ulid_lexicographic_order_matches_big_endian_binary() -> None:
    """Sorting canonical strings must match sorting binary big-endian ULIDs."""
    generator = UlidGenerator()
    # Three blocks of one timestamp each cover fresh draws and increments.
    values = [
        generator.generate_bytes(seed_time=1_700_000_000_000 + index // 100)
        for index in range(300)
    ]

    sorted_by_binary = sorted(values)
    sorted_by_string = sorted(values, key=ulid_bytes_to_str)

    assert sorted_by_binary == sorted_by_string


def test_binary_layout_places_timestamp_in_high_48_bits() -> None:
    value = Ulid(timestamp=0x0102030405FF, randomness=0x0A0B0C0D0E0F10111213)

    assert value.to_bytes() == bytes.fromhex("0102030405ff0a0b0c0d0e0f10111213")
    assert Ulid.from_bytes(value.to_bytes()) == value
    assert Ulid.from_int(value.to_int()) == value


def test_decode_returns_both_components() -> None:
    value = decode("01F4QRCJ00" + "0" * 15 + "1")

    assert value.timestamp == 1620000000000
    assert value.randomness == 1
    assert str(value) == "01F4QRCJ00" + "0" * 15 + "1"


def test_parse_lowercase_normalizes_to_uppercase_string() -> None:
    assert str(Ulid.parse("01arz3ndektsv4rrffq69g5fav")) == "01ARZ3NDEKTSV4RRFFQ69G5FAV"


def test_parse_rejects_values_beyond_128_bits() -> None:
    with pytest.raises(MalformedUlid):
        Ulid.parse("8" + "0" * 25)


def test_ulid_rejects_out_of_range_components() -> None:
    with pytest.raises(ValueError):
        Ulid(timestamp=TIME_MAX + 1, randomness=0)
    with pytest.raises(ValueError):
        Ulid(timestamp=0, randomness=RANDOM_MAX + 1)


def test_ulid_values_order_like_their_strings() -> None:
    earlier = Ulid(timestamp=5, randomness=RANDOM_MAX)
    later = Ulid(timestamp=6, randomness=0)

    assert earlier < later
    assert str(earlier) < str(later)


def test_as_datetime_is_utc() -> None:
    value = Ulid(timestamp=1620000000000, randomness=0)
    assert value.as_datetime() == datetime(2021, 5, 3, 0, 0, tzinfo=UTC)


def test_require_ulid_bytes_normalizes_bytes_like_values() -> None:
    data = bytearray(range(16))
    assert require_ulid_bytes(data) == bytes(range(16))

    with pytest.raises(MalformedUlid, match="session_id"):
        require_ulid_bytes(b"\x00" * 15, field_name="session_id")
    with pytest.raises(MalformedUlid):
        require_ulid_bytes("0" * 16)
