"""Composable instrumentation for public ULID API methods.

One decorator, ``public_api_instrumented``, times each call and dispatches
invocation/completion events to a set of concerns (logging, OpenTelemetry
metrics, OpenTelemetry tracing). A failing concern is logged and counted but
never changes the outcome of the wrapped call.
"""

from __future__ import annotations

import inspect
from contextvars import ContextVar
from dataclasses import dataclass
from functools import lru_cache, wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from opentelemetry import metrics as otel_metrics
from opentelemetry import trace as otel_trace
from opentelemetry.trace import Status, StatusCode

from packages.ulid_core.config import PublicApiOtelSettings, load_core_settings
from packages.ulid_core.errors import exception_to_error

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    error_categories: list[str]
    error_codes: list[str]


class PublicApiInstrumentationConcern(Protocol):
    """Hook contract for one public API instrumentation concern."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle invocation-start event for one method call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle completion event for one method call."""


class PublicApiLoggingConcern:
    """Log invocation and completion events.

    Successful calls log at DEBUG since generation is a hot path; failures
    log at WARNING.
    """

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        with log_context(_invocation_log_context(context)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors or None,
                fields.ERROR_CODE: ",".join(context.error_codes) or None,
            }
        )
        with log_context(payload):
            if context.success:
                self._logger.debug("Public API completion")
            else:
                self._logger.warning("Public API completion")


class _CounterLike(Protocol):
    def add(self, amount: int | float, attributes: Mapping[str, str]) -> None:
        """Record one counter increment with attributes."""


class _HistogramLike(Protocol):
    def record(self, amount: float, attributes: Mapping[str, str]) -> None:
        """Record one sample with attributes."""


class _SpanLike(Protocol):
    def set_attribute(self, key: str, value: object) -> None:
        """Attach one attribute to a span."""

    def record_exception(self, exception: Exception) -> None:
        """Record one exception on a span."""

    def set_status(self, status: object) -> None:
        """Set the status of a span."""


class _SpanContextManagerLike(Protocol):
    def __enter__(self) -> _SpanLike:
        """Enter and return the active span."""

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        """Exit and close the active span."""


class _TracerLike(Protocol):
    def start_as_current_span(self, name: str) -> _SpanContextManagerLike:
        """Start one span and return a context manager."""


@dataclass(frozen=True)
class _TraceScope:
    manager: _SpanContextManagerLike
    span: _SpanLike


class PublicApiTracingConcern:
    """Open one span per invocation and close it on completion."""

    def __init__(self, *, tracer: _TracerLike) -> None:
        self._tracer = tracer
        self._active_scopes: ContextVar[tuple[_TraceScope, ...]] = ContextVar(
            "ulid_public_api_tracing_scopes", default=()
        )

    def on_invocation(self, context: InvocationContext) -> None:
        manager = self._tracer.start_as_current_span(
            f"public_api.{context.component_id}.{context.api_name}"
        )
        span = manager.__enter__()
        # Push before touching attributes so completion always exits the span.
        self._active_scopes.set(
            (*self._active_scopes.get(), _TraceScope(manager=manager, span=span))
        )
        span.set_attribute(fields.COMPONENT_ID, context.component_id)
        span.set_attribute(fields.API_NAME, context.api_name)
        for key, value in context.references.items():
            span.set_attribute(f"reference.{key}", value)

    def on_completion(self, context: CompletionContext) -> None:
        current = self._active_scopes.get()
        if not current:
            return
        scope = current[-1]
        self._active_scopes.set(current[:-1])

        try:
            scope.span.set_attribute(fields.SUCCESS, context.success)
            scope.span.set_attribute(fields.DURATION_MS, context.duration_ms)
            scope.span.set_attribute(fields.OUTCOME, _outcome(context))
            if not context.success:
                scope.span.set_status(Status(StatusCode.ERROR))
                if context.error_codes:
                    scope.span.set_attribute(fields.ERROR_CODE, context.error_codes[0])
                if context.errors:
                    scope.span.record_exception(
                        RuntimeError("; ".join(context.errors[:3]))
                    )
        finally:
            scope.manager.__exit__(None, None, None)


class PublicApiMetricsConcern:
    """Emit call counts, latency, and error counts on completion."""

    def __init__(
        self,
        *,
        public_api_calls_total: _CounterLike,
        public_api_duration_ms: _HistogramLike,
        public_api_errors_total: _CounterLike,
    ) -> None:
        self._public_api_calls_total = public_api_calls_total
        self._public_api_duration_ms = public_api_duration_ms
        self._public_api_errors_total = public_api_errors_total

    def on_invocation(self, context: InvocationContext) -> None:
        del context

    def on_completion(self, context: CompletionContext) -> None:
        attrs = {
            fields.COMPONENT_ID: context.invocation.component_id,
            fields.API_NAME: context.invocation.api_name,
            fields.OUTCOME: _outcome(context),
        }
        self._public_api_calls_total.add(1, attributes=attrs)
        self._public_api_duration_ms.record(context.duration_ms, attributes=attrs)

        if context.success:
            return

        for category in context.error_categories or ["unknown"]:
            self._public_api_errors_total.add(
                1,
                attributes={
                    fields.COMPONENT_ID: context.invocation.component_id,
                    fields.API_NAME: context.invocation.api_name,
                    fields.ERROR_CATEGORY: category,
                },
            )


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
    include_default_concerns: bool = True,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with composable instrumentation concerns.

    ``id_fields`` names arguments whose values are attached to every event as
    references. The default OTel tracing and metrics concerns are appended
    unless ``include_default_concerns`` is false; they are resolved per call so
    names applied through ``configure_public_api_otel`` take effect for methods
    decorated at import time.
    """
    explicit_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(
        concerns or ()
    )
    if logger is not None:
        explicit_concerns = (PublicApiLoggingConcern(logger=logger), *explicit_concerns)
    if len(explicit_concerns) == 0 and not include_default_concerns:
        raise ValueError("public_api_instrumented requires at least one concern")

    def resolve_concerns() -> tuple[PublicApiInstrumentationConcern, ...]:
        if not include_default_concerns:
            return explicit_concerns
        return (
            *explicit_concerns,
            _default_public_api_tracing_concern(),
            _default_public_api_metrics_concern(),
        )

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            resolved_concerns = resolve_concerns()
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                references=_references(signature, id_fields, args, kwargs),
            )
            _emit_invocation(concerns=resolved_concerns, context=invocation, logger=logger)

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                detail = exception_to_error(exc)
                completion = CompletionContext(
                    invocation=invocation,
                    success=False,
                    duration_ms=_elapsed_ms(started),
                    errors=[f"{type(exc).__name__}: {exc}"],
                    error_categories=[detail.category.value],
                    error_codes=[detail.code],
                )
                _emit_completion(
                    concerns=resolved_concerns, context=completion, logger=logger
                )
                raise

            completion = CompletionContext(
                invocation=invocation,
                success=True,
                duration_ms=_elapsed_ms(started),
                errors=[],
                error_categories=[],
                error_codes=[],
            )
            _emit_completion(concerns=resolved_concerns, context=completion, logger=logger)
            return result

        return wrapper

    return decorator


def _references(
    signature: inspect.Signature,
    id_fields: tuple[str, ...],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, str]:
    """Return stringified values of ``id_fields`` bound by this call."""
    if not id_fields:
        return {}
    try:
        bound = signature.bind_partial(*args, **kwargs).arguments
    except TypeError:
        # The call itself will raise; report no references for it.
        return {}
    return {
        name: str(bound[name])
        for name in id_fields
        if bound.get(name) not in (None, "")
    }


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _outcome(context: CompletionContext) -> str:
    return "success" if context.success else "failure"


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        **context.references,
    }


def _emit_invocation(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: InvocationContext,
    logger: Any | None,
) -> None:
    for concern in concerns:
        try:
            concern.on_invocation(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="invocation",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context,
            )


def _emit_completion(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: CompletionContext,
    logger: Any | None,
) -> None:
    for concern in concerns:
        try:
            concern.on_completion(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="completion",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context.invocation,
            )


def _log_concern_failure(
    *,
    logger: Any | None,
    stage: str,
    concern: str,
    exc: Exception,
    invocation: InvocationContext,
) -> None:
    """Warn about and count one failed concern hook."""
    if logger is not None:
        with log_context(
            {
                fields.EVENT: fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT,
                fields.COMPONENT_ID: invocation.component_id,
                fields.API_NAME: invocation.api_name,
                fields.STAGE: stage,
                fields.CONCERN: concern,
                fields.ERRORS: [f"{type(exc).__name__}: {exc}"],
            }
        ):
            logger.warning("Public API instrumentation concern failed")
    _default_otel_instruments().instrumentation_failures_total.add(
        1,
        attributes={
            fields.COMPONENT_ID: invocation.component_id,
            fields.API_NAME: invocation.api_name,
            fields.STAGE: stage,
            fields.CONCERN: concern,
        },
    )


@dataclass(frozen=True)
class _OtelInstruments:
    public_api_calls_total: _CounterLike
    public_api_duration_ms: _HistogramLike
    public_api_errors_total: _CounterLike
    instrumentation_failures_total: _CounterLike


_configured_otel: PublicApiOtelSettings | None = None


def configure_public_api_otel(otel: PublicApiOtelSettings | None = None) -> None:
    """Name default tracers, meters, and metrics from ``otel``.

    Passing ``None`` falls back to process-wide settings. Cached default
    concerns are rebuilt on the next instrumented call.
    """
    global _configured_otel
    _configured_otel = otel
    _default_public_api_tracing_concern.cache_clear()
    _default_public_api_metrics_concern.cache_clear()
    _default_otel_instruments.cache_clear()


def _otel_settings() -> PublicApiOtelSettings:
    if _configured_otel is not None:
        return _configured_otel
    return load_core_settings().observability.public_api.otel


@lru_cache(maxsize=1)
def _default_public_api_tracing_concern() -> PublicApiTracingConcern:
    """Build the OTel-backed tracing concern from configured names."""
    otel = _otel_settings()
    return PublicApiTracingConcern(tracer=otel_trace.get_tracer(otel.tracer_name))


@lru_cache(maxsize=1)
def _default_public_api_metrics_concern() -> PublicApiMetricsConcern:
    """Build the OTel-backed metrics concern from configured names."""
    instruments = _default_otel_instruments()
    return PublicApiMetricsConcern(
        public_api_calls_total=instruments.public_api_calls_total,
        public_api_duration_ms=instruments.public_api_duration_ms,
        public_api_errors_total=instruments.public_api_errors_total,
    )


@lru_cache(maxsize=1)
def _default_otel_instruments() -> _OtelInstruments:
    """Create OTel metric instruments named from settings.

    Without a configured SDK these resolve to the API's no-op instruments.
    """
    otel = _otel_settings()
    meter = otel_metrics.get_meter(otel.meter_name)
    return _OtelInstruments(
        public_api_calls_total=meter.create_counter(
            name=otel.metric_public_api_calls_total,
            description="Count of public API invocations by component/method/outcome.",
            unit="1",
        ),
        public_api_duration_ms=meter.create_histogram(
            name=otel.metric_public_api_duration_ms,
            description="Public API invocation latency in milliseconds.",
            unit="ms",
        ),
        public_api_errors_total=meter.create_counter(
            name=otel.metric_public_api_errors_total,
            description="Count of public API failures by error category.",
            unit="1",
        ),
        instrumentation_failures_total=meter.create_counter(
            name=otel.metric_instrumentation_failures_total,
            description="Count of instrumentation concern failures.",
            unit="1",
        ),
    )
