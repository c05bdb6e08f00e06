"""Configuration loading with deterministic precedence.

The cascade is always:
1) CLI params
2) Environment variables
3) ~/.config/ulid-core/ulid.yaml
4) Model defaults

Environment variable format:
- Prefix: ``ULID_``
- Nested keys: ``__`` separator
- Example: ``ULID_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Mapping

from .models import DEFAULT_CONFIG_PATH, UlidCoreSettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> UlidCoreSettings:
    """Load settings by applying the standard precedence cascade."""
    resolved = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    settings_cls = _settings_class_for(resolved)
    return settings_cls(**dict(cli_params or {}))


@lru_cache(maxsize=1)
def load_core_settings() -> UlidCoreSettings:
    """Return process-wide settings from env/yaml/defaults, cached."""
    return load_settings()


def _settings_class_for(config_path: Path) -> type[UlidCoreSettings]:
    """Return a settings subclass bound to one YAML file path."""
    if config_path == UlidCoreSettings._config_path:
        return UlidCoreSettings
    return type(
        "ScopedUlidCoreSettings",
        (UlidCoreSettings,),
        {
            "__module__": __name__,
            "__annotations__": {"_config_path": ClassVar[Path]},
            "_config_path": config_path,
        },
    )
