"""Tests for ULID exception normalization into error details."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from packages.ulid_core.errors import (
    EntropyOverflow,
    ErrorCategory,
    InvalidSeedTime,
    MalformedUlid,
    UlidError,
    codes,
    exception_to_error,
)


def test_library_errors_share_a_base_class() -> None:
    for exc in (InvalidSeedTime(-1), EntropyOverflow(5), MalformedUlid("bad")):
        assert isinstance(exc, UlidError)


def test_invalid_seed_time_maps_to_validation() -> None:
    detail = exception_to_error(InvalidSeedTime(-1))

    assert detail.code == codes.INVALID_SEED_TIME
    assert detail.category is ErrorCategory.VALIDATION
    assert detail.retryable is False
    assert "-1" in detail.message
    assert detail.metadata == {"exception_type": "InvalidSeedTime"}


def test_malformed_ulid_maps_to_validation() -> None:
    detail = exception_to_error(MalformedUlid("Invalid ULID character: '!'"))

    assert detail.code == codes.MALFORMED_ULID
    assert detail.category is ErrorCategory.VALIDATION


def test_entropy_overflow_is_retryable_exhaustion() -> None:
    detail = exception_to_error(EntropyOverflow(1620000000000))

    assert detail.code == codes.ENTROPY_OVERFLOW
    assert detail.category is ErrorCategory.EXHAUSTED
    assert detail.retryable is True
    assert "1620000000000" in detail.message


def test_generic_exceptions_fall_back_to_shared_codes() -> None:
    assert exception_to_error(ValueError("x")).code == codes.INVALID_ARGUMENT

    detail = exception_to_error(RuntimeError())
    assert detail.code == codes.UNEXPECTED_EXCEPTION
    assert detail.category is ErrorCategory.INTERNAL
    assert detail.message == "unexpected exception"
