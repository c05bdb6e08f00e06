"""Canonical logging field names.

These constants define a stable key set for structured logs and context
propagation so log records, span attributes, and metric attributes agree.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
OUTCOME = "outcome"
ERROR_CATEGORY = "error_category"
ERROR_CODE = "error_code"
STAGE = "stage"
CONCERN = "concern"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
