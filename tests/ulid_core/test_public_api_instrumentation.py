"""Unit tests for public API instrumentation concerns and decorator."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from packages.ulid_core.errors import MalformedUlid
from packages.ulid_core.logging.public_api import (
    CompletionContext,
    InvocationContext,
    PublicApiMetricsConcern,
    PublicApiTracingConcern,
    public_api_instrumented,
)


class _FakeCounter:
    """In-memory fake counter recording each add call."""

    def __init__(self) -> None:
        self.calls: list[tuple[int | float, dict[str, str]]] = []

    def add(self, amount: int | float, attributes: dict[str, str]) -> None:
        self.calls.append((amount, dict(attributes)))


class _FakeHistogram:
    """In-memory fake histogram recording each sample."""

    def __init__(self) -> None:
        self.samples: list[tuple[float, dict[str, str]]] = []

    def record(self, amount: float, attributes: dict[str, str]) -> None:
        self.samples.append((amount, dict(attributes)))


class _FakeSpan:
    def __init__(self) -> None:
        self.attributes: dict[str, object] = {}
        self.exceptions: list[Exception] = []
        self.statuses: list[object] = []

    def set_attribute(self, key: str, value: object) -> None:
        self.attributes[key] = value

    def record_exception(self, exception: Exception) -> None:
        self.exceptions.append(exception)

    def set_status(self, status: object) -> None:
        self.statuses.append(status)


class _FakeSpanManager:
    def __init__(self, span: _FakeSpan) -> None:
        self._span = span
        self.exited = False

    def __enter__(self) -> _FakeSpan:
        return self._span

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        del exc_type, exc, tb
        self.exited = True


class _RejectingSpan(_FakeSpan):
    def set_attribute(self, key: str, value: object) -> None:
        raise RuntimeError(f"attribute rejected: {key}")


class _FakeTracer:
    def __init__(self, span_type: type[_FakeSpan] = _FakeSpan) -> None:
        self._span_type = span_type
        self.names: list[str] = []
        self.managers: list[_FakeSpanManager] = []

    def start_as_current_span(self, name: str) -> _FakeSpanManager:
        self.names.append(name)
        manager = _FakeSpanManager(self._span_type())
        self.managers.append(manager)
        return manager


class _RecordingConcern:
    """Concern capturing every event it receives."""

    def __init__(self) -> None:
        self.invocations: list[InvocationContext] = []
        self.completions: list[CompletionContext] = []

    def on_invocation(self, context: InvocationContext) -> None:
        self.invocations.append(context)

    def on_completion(self, context: CompletionContext) -> None:
        self.completions.append(context)


class _ExplodingConcern:
    def on_invocation(self, context: InvocationContext) -> None:
        raise RuntimeError("boom")

    def on_completion(self, context: CompletionContext) -> None:
        raise RuntimeError("boom")


class _FakeLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def debug(self, message: str) -> None:
        self.records.append(("debug", message))

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))


def _invocation() -> InvocationContext:
    return InvocationContext(
        component_id="service_ulid",
        api_name="decode_time",
        references={"text": "01ARZ3NDEKTSV4RRFFQ69G5FAV"},
    )


def _completion(*, success: bool) -> CompletionContext:
    return CompletionContext(
        invocation=_invocation(),
        success=success,
        duration_ms=0.25,
        errors=[] if success else ["MalformedUlid: bad"],
        error_categories=[] if success else ["validation"],
        error_codes=[] if success else ["MALFORMED_ULID"],
    )


def _metrics() -> tuple[PublicApiMetricsConcern, _FakeCounter, _FakeHistogram, _FakeCounter]:
    calls = _FakeCounter()
    durations = _FakeHistogram()
    errors = _FakeCounter()
    concern = PublicApiMetricsConcern(
        public_api_calls_total=calls,
        public_api_duration_ms=durations,
        public_api_errors_total=errors,
    )
    return concern, calls, durations, errors


def test_metrics_concern_emits_calls_and_duration_for_success() -> None:
    concern, calls, durations, errors = _metrics()

    concern.on_completion(_completion(success=True))

    expected = {
        "component_id": "service_ulid",
        "api_name": "decode_time",
        "outcome": "success",
    }
    assert calls.calls == [(1, expected)]
    assert durations.samples == [(0.25, expected)]
    assert errors.calls == []


def test_metrics_concern_counts_failures_by_category() -> None:
    concern, calls, _, errors = _metrics()

    concern.on_completion(_completion(success=False))

    assert calls.calls[0][1]["outcome"] == "failure"
    assert errors.calls == [
        (
            1,
            {
                "component_id": "service_ulid",
                "api_name": "decode_time",
                "error_category": "validation",
            },
        )
    ]


def test_tracing_concern_opens_and_closes_one_span() -> None:
    tracer = _FakeTracer()
    concern = PublicApiTracingConcern(tracer=tracer)

    concern.on_invocation(_invocation())
    concern.on_completion(_completion(success=False))

    assert tracer.names == ["public_api.service_ulid.decode_time"]
    manager = tracer.managers[0]
    span = manager._span
    assert manager.exited is True
    assert span.attributes["reference.text"] == "01ARZ3NDEKTSV4RRFFQ69G5FAV"
    assert span.attributes["outcome"] == "failure"
    assert span.attributes["error_code"] == "MALFORMED_ULID"
    assert len(span.statuses) == 1
    assert len(span.exceptions) == 1


def test_tracing_concern_ignores_completion_without_scope() -> None:
    concern = PublicApiTracingConcern(tracer=_FakeTracer())
    concern.on_completion(_completion(success=True))


def test_tracing_concern_exits_span_when_attributes_fail() -> None:
    tracer = _FakeTracer(span_type=_RejectingSpan)
    concern = PublicApiTracingConcern(tracer=tracer)

    with pytest.raises(RuntimeError):
        concern.on_invocation(_invocation())
    with pytest.raises(RuntimeError):
        concern.on_completion(_completion(success=True))

    assert tracer.managers[0].exited is True


def test_decorator_reports_success_with_positional_references() -> None:
    recorder = _RecordingConcern()

    @public_api_instrumented(
        component_id="service_ulid",
        id_fields=("seed_time",),
        concerns=(recorder,),
        include_default_concerns=False,
    )
    def generate(seed_time: int | None = None) -> str:
        return "01ARZ3NDEKTSV4RRFFQ69G5FAV"

    assert generate(1620000000000) == "01ARZ3NDEKTSV4RRFFQ69G5FAV"

    assert recorder.invocations[0].api_name == "generate"
    assert recorder.invocations[0].references == {"seed_time": "1620000000000"}
    assert recorder.completions[0].success is True
    assert recorder.completions[0].errors == []


def test_decorator_reports_failure_category_and_reraises() -> None:
    recorder = _RecordingConcern()

    @public_api_instrumented(
        component_id="service_ulid",
        concerns=(recorder,),
        include_default_concerns=False,
    )
    def decode_time(text: str) -> int:
        raise MalformedUlid("bad")

    with pytest.raises(MalformedUlid):
        decode_time("bad")

    completion = recorder.completions[0]
    assert completion.success is False
    assert completion.error_categories == ["validation"]
    assert completion.error_codes == ["MALFORMED_ULID"]
    assert completion.errors == ["MalformedUlid: bad"]


def test_failing_concern_does_not_change_call_outcome() -> None:
    logger = _FakeLogger()
    recorder = _RecordingConcern()

    @public_api_instrumented(
        component_id="service_ulid",
        concerns=(_ExplodingConcern(), recorder),
        logger=logger,
        include_default_concerns=False,
    )
    def is_valid(text: Any) -> bool:
        return True

    assert is_valid("x") is True
    assert len(recorder.completions) == 1
    assert logger.records.count(("warning", "Public API instrumentation concern failed")) == 2
    assert ("debug", "Public API completion") in logger.records


def test_decorator_requires_at_least_one_concern() -> None:
    with pytest.raises(ValueError):
        public_api_instrumented(component_id="service_ulid", include_default_concerns=False)


def test_default_concerns_run_against_otel_api() -> None:
    """Without an SDK the OTel API resolves to no-op tracer and meter."""

    @public_api_instrumented(component_id="service_ulid")
    def generate() -> str:
        return "ok"

    assert generate() == "ok"
