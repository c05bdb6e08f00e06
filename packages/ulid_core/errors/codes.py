"""ULID error code constants.

These codes are stable machine-readable identifiers attached to normalized
``ErrorDetail`` values and emitted in CLI JSON error output.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
INVALID_SEED_TIME = "INVALID_SEED_TIME"
MALFORMED_ULID = "MALFORMED_ULID"

# Exhaustion
ENTROPY_OVERFLOW = "ENTROPY_OVERFLOW"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
