"""Structured logging context backed by ``contextvars``.

Fields bound here are attached to every record emitted from the same thread or
task, which lets instrumentation tag log lines with the API being invoked
without threading extra arguments through the codec.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

LogValue = str | list[str]

_LOG_CONTEXT: ContextVar[dict[str, LogValue]] = ContextVar(
    "ulid_log_context", default={}
)


def get_context() -> dict[str, LogValue]:
    """Return a shallow copy of the bound fields."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind fields into the current context, skipping ``None`` values.

    Scalars are stringified; lists and tuples become lists of strings so JSON
    output keeps their shape.
    """
    if not values:
        return
    merged = {**_LOG_CONTEXT.get(), **_normalize(values)}
    _LOG_CONTEXT.set(merged)


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when no names are given."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set(
        {key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys}
    )


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind fields for the duration of a block, then restore the prior context."""
    token = _LOG_CONTEXT.set({**_LOG_CONTEXT.get(), **_normalize(values)})
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _normalize(values: Mapping[str, object]) -> dict[str, LogValue]:
    output: dict[str, LogValue] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            output[str(key)] = [str(item) for item in value]
        else:
            output[str(key)] = str(value)
    return output
