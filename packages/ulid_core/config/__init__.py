"""Public API for ulid-core configuration utilities."""

from .loader import load_core_settings, load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    GeneratorSettings,
    LoggingSettings,
    ObservabilitySettings,
    PublicApiOtelSettings,
    UlidCoreSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "GeneratorSettings",
    "LoggingSettings",
    "ObservabilitySettings",
    "PublicApiOtelSettings",
    "UlidCoreSettings",
    "load_core_settings",
    "load_settings",
]
