"""Tests for the instrumented ULID service facade."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from packages.ulid_core.config import load_settings
from packages.ulid_core.errors import InvalidSeedTime, MalformedUlid
from packages.ulid_core.ids import ClockRegressionPolicy, Ulid, UlidGenerator
from packages.ulid_core.implementation import DefaultUlidService
from packages.ulid_core.service import build_ulid_service


def _service() -> DefaultUlidService:
    return DefaultUlidService(
        generator=UlidGenerator(
            clock=lambda: 1620000000000,
            random_bytes=lambda length: b"\x00" * length,
        )
    )


def test_generate_then_decode_time() -> None:
    service = _service()

    value = service.generate()

    assert value == "01F4QRCJ00" + "0" * 16
    assert service.decode_time(value) == 1620000000000
    assert service.is_valid(value) is True


def test_generate_is_monotonic_within_a_millisecond() -> None:
    service = _service()
    values = [service.generate() for _ in range(50)]
    assert values == sorted(values)
    assert len(set(values)) == 50


def test_generate_with_seed_time() -> None:
    service = _service()
    assert service.decode_time(service.generate(seed_time=42)) == 42


def test_errors_propagate_from_service() -> None:
    service = _service()

    with pytest.raises(InvalidSeedTime):
        service.generate(seed_time=-1)
    with pytest.raises(MalformedUlid):
        service.decode_time("short")
    assert service.is_valid("short") is False


def test_decode_returns_ulid_value() -> None:
    service = _service()
    assert service.decode("01F4QRCJ00" + "0" * 16) == Ulid(1620000000000, 0)


def test_build_from_settings_applies_clock_regression(tmp_path: Path) -> None:
    settings = load_settings(
        cli_params={"generator": {"clock_regression": "hold"}},
        config_path=tmp_path / "missing.yaml",
    )

    service = build_ulid_service(settings=settings)

    assert isinstance(service, DefaultUlidService)
    assert service.generator.entropy.clock_regression is ClockRegressionPolicy.HOLD
