"""Factory helpers for creating consistent error details."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def validation_error(
    message: str,
    *,
    code: str = codes.VALIDATION_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create a validation-category error."""
    return ErrorDetail(
        code=code,
        message=message,
        category=ErrorCategory.VALIDATION,
        retryable=False,
        metadata=_meta(metadata),
    )


def exhausted_error(
    message: str,
    *,
    code: str = codes.ENTROPY_OVERFLOW,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create an exhaustion-category error.

    Exhaustion is bound to one millisecond, so a caller-side retry succeeds
    once the clock advances.
    """
    return ErrorDetail(
        code=code,
        message=message,
        category=ErrorCategory.EXHAUSTED,
        retryable=True,
        metadata=_meta(metadata),
    )


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Create an internal-category error."""
    return ErrorDetail(
        code=code,
        message=message,
        category=ErrorCategory.INTERNAL,
        retryable=False,
        metadata=_meta(metadata),
    )


def _meta(metadata: Mapping[str, str] | None) -> dict[str, str]:
    """Normalize optional metadata into a mutable plain dict."""
    if metadata is None:
        return {}
    return dict(metadata)
