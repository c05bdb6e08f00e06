"""Public error API for ulid-core."""

from . import codes
from .exceptions import EntropyOverflow, InvalidSeedTime, MalformedUlid, UlidError
from .factories import exhausted_error, internal_error, validation_error
from .normalize import exception_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "EntropyOverflow",
    "ErrorCategory",
    "ErrorDetail",
    "InvalidSeedTime",
    "MalformedUlid",
    "UlidError",
    "codes",
    "exception_to_error",
    "exhausted_error",
    "internal_error",
    "validation_error",
]
