"""Stdout logging configuration for ulid-core hosts.

The library itself only creates module loggers; hosts such as the CLI call
``configure_logging`` once to install a single handler that emits either
newline-delimited JSON or human-readable lines with context appended.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

from . import fields
from .context import bind_context, get_context

_CORE_FIELDS = (fields.TIMESTAMP, fields.LEVEL, fields.LOGGER, fields.MESSAGE)


class ContextFilter(logging.Filter):
    """Copy the bound logging context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record with stable core fields first."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            # Context never overrides the core fields.
            payload.update(
                {key: value for key, value in context.items() if key not in _CORE_FIELDS}
            )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable formatter that appends context as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if not isinstance(context, dict) or not context:
            return message
        pairs = []
        for key, value in sorted(context.items()):
            if isinstance(value, list):
                value = ",".join(value)
            pairs.append(f"{key}={value}")
        return f"{message} {' '.join(pairs)}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Install one stream handler on the root logger.

    Calling this again replaces the previous handler instead of stacking a
    second one.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level.upper())

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())
    root.addHandler(handler)

    bind_context(**{fields.SERVICE: service, fields.ENVIRONMENT: environment})


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger from the standard logging hierarchy."""
    return logging.getLogger(name)
