"""Exception normalization utilities for ULID error contracts."""

from __future__ import annotations

from . import codes
from .exceptions import EntropyOverflow, InvalidSeedTime, MalformedUlid
from .factories import exhausted_error, internal_error, validation_error
from .types import ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a Python exception into an ``ErrorDetail``.

    Library exceptions map to their own codes first; generic ``ValueError``
    and ``OverflowError`` fall back to shared codes.
    """
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, (InvalidSeedTime, MalformedUlid)):
        return validation_error(str(exc), code=exc.code, metadata=metadata)

    if isinstance(exc, EntropyOverflow):
        return exhausted_error(str(exc), code=exc.code, metadata=metadata)

    if isinstance(exc, ValueError):
        return validation_error(str(exc), code=codes.INVALID_ARGUMENT, metadata=metadata)

    if isinstance(exc, OverflowError):
        return exhausted_error(str(exc), code=codes.ENTROPY_OVERFLOW, metadata=metadata)

    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
