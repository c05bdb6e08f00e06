"""Canonical error types for ulid-core.

This module defines a transport-agnostic error taxonomy and shape used by
instrumentation concerns and the CLI when reporting failures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """High-level error categories for ULID operations."""

    VALIDATION = "validation"
    EXHAUSTED = "exhausted"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """Structured error object describing one failed operation."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)
