"""
nodeconfig settings package public API.

File: src/nodeconfig/config/__init__.py

Purpose
- Export settings loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``nodeconfig.toml`` + ``NODECONFIG_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from nodeconfig.config.loader import (
    DEFAULT_SETTINGS_FILE,
    ENV_PREFIX,
    SettingsLoadError,
    dump_effective_settings,
    load_settings,
    load_settings_payload,
)
from nodeconfig.config.schema import (
    DEFAULT_SETTINGS,
    EngineSettings,
    SettingsIssue,
    SettingsValidationError,
    SettingsValidationResult,
    assert_valid_settings,
    default_settings,
    merge_settings,
    validate_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "DEFAULT_SETTINGS_FILE",
    "ENV_PREFIX",
    "EngineSettings",
    "SettingsIssue",
    "SettingsLoadError",
    "SettingsValidationError",
    "SettingsValidationResult",
    "assert_valid_settings",
    "default_settings",
    "dump_effective_settings",
    "load_settings",
    "load_settings_payload",
    "merge_settings",
    "validate_settings",
]
