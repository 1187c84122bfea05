"""
nodeconfig — engine settings schema and validation.

File: src/nodeconfig/config/schema.py

Purpose
- Define authoritative settings defaults and strict validation rules.

What should be included in this file
- Schema versioning and migration guidance.
- Validation rules for unknown keys, types, enums and numeric bounds.
- Deterministic deep-merge helper used by the loader.
- The typed ``EngineSettings`` view consumed by the engine and CLI.

Functional requirements
- Validate settings payloads and return structured issues (dotted path + message).

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, Literal, TypedDict

from nodeconfig.constants import (
    DEFAULT_SEARCH_RESULTS,
    ESSENTIALS_TOTAL_LIMIT,
    MAX_DESCRIPTOR_DEPTH,
    MAX_ITERATIONS_WARNING_THRESHOLD,
    MAX_SIMPLIFIED_OPTIONS,
    MAX_TOP_K_WARNING_THRESHOLD,
    MIN_TOOL_DESCRIPTION_LENGTH,
    SETTINGS_SCHEMA_VERSION,
)
from nodeconfig.domain.models import ValidationProfile
from nodeconfig.validation.tool_validators import ToolValidationSettings


LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")


class MetaSettings(TypedDict):
    schema_version: int


class ValidationSettings(TypedDict):
    default_profile: Literal["minimal", "runtime", "strict"]
    min_tool_description_length: int
    max_iterations_warning_threshold: int
    max_top_k_warning_threshold: int


class PropertySettings(TypedDict):
    search_max_results: int
    max_options: int
    max_tree_depth: int
    essentials_total_limit: int


class ObservabilitySettings(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_format: Literal["json", "text"]


class SettingsPayload(TypedDict):
    meta: MetaSettings
    validation: ValidationSettings
    properties: PropertySettings
    observability: ObservabilitySettings


DEFAULT_SETTINGS: Final[SettingsPayload] = {
    "meta": {
        "schema_version": SETTINGS_SCHEMA_VERSION,
    },
    "validation": {
        "default_profile": "runtime",
        "min_tool_description_length": MIN_TOOL_DESCRIPTION_LENGTH,
        "max_iterations_warning_threshold": MAX_ITERATIONS_WARNING_THRESHOLD,
        "max_top_k_warning_threshold": MAX_TOP_K_WARNING_THRESHOLD,
    },
    "properties": {
        "search_max_results": DEFAULT_SEARCH_RESULTS,
        "max_options": MAX_SIMPLIFIED_OPTIONS,
        "max_tree_depth": MAX_DESCRIPTOR_DEPTH,
        "essentials_total_limit": ESSENTIALS_TOTAL_LIMIT,
    },
    "observability": {
        "log_level": "WARNING",
        "log_format": "text",
    },
}


@dataclass(frozen=True, slots=True)
class SettingsIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class SettingsValidationResult:
    settings: dict[str, Any] | None
    issues: tuple[SettingsIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.settings is not None and not self.issues


class SettingsValidationError(ValueError):
    """Raised when strict settings validation fails."""

    def __init__(self, issues: Sequence[SettingsIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid settings:\n{rendered}")


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Typed, validated engine settings."""

    default_profile: ValidationProfile = ValidationProfile.RUNTIME
    min_tool_description_length: int = MIN_TOOL_DESCRIPTION_LENGTH
    max_iterations_warning_threshold: int = MAX_ITERATIONS_WARNING_THRESHOLD
    max_top_k_warning_threshold: int = MAX_TOP_K_WARNING_THRESHOLD
    search_max_results: int = DEFAULT_SEARCH_RESULTS
    max_options: int = MAX_SIMPLIFIED_OPTIONS
    max_tree_depth: int = MAX_DESCRIPTOR_DEPTH
    essentials_total_limit: int = ESSENTIALS_TOTAL_LIMIT
    log_level: str = "WARNING"
    log_format: str = "text"

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> EngineSettings:
        """Build settings from a payload; raises ``SettingsValidationError`` when invalid."""

        validated = assert_valid_settings(merge_settings(default_settings(), payload))
        validation = validated["validation"]
        properties = validated["properties"]
        observability = validated["observability"]
        return cls(
            default_profile=ValidationProfile(validation["default_profile"]),
            min_tool_description_length=validation["min_tool_description_length"],
            max_iterations_warning_threshold=validation["max_iterations_warning_threshold"],
            max_top_k_warning_threshold=validation["max_top_k_warning_threshold"],
            search_max_results=properties["search_max_results"],
            max_options=properties["max_options"],
            max_tree_depth=properties["max_tree_depth"],
            essentials_total_limit=properties["essentials_total_limit"],
            log_level=observability["log_level"],
            log_format=observability["log_format"],
        )

    def tool_settings(self) -> ToolValidationSettings:
        return ToolValidationSettings(
            min_description_length=self.min_tool_description_length,
            max_iterations_warning_threshold=self.max_iterations_warning_threshold,
            max_top_k_warning_threshold=self.max_top_k_warning_threshold,
        )


def default_settings() -> SettingsPayload:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_SETTINGS)


def migration_guidance(found_version: int) -> str:
    if found_version < SETTINGS_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is older than supported {SETTINGS_SCHEMA_VERSION}; "
            "upgrade nodeconfig.toml to the current schema"
        )
    if found_version > SETTINGS_SCHEMA_VERSION:
        return (
            f"schema version {found_version} is newer than supported {SETTINGS_SCHEMA_VERSION}; "
            "upgrade the nodeconfig-engine package"
        )
    return "schema version is current"


def merge_settings(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``; neither input is mutated."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in sorted(overlay.items()):
        if isinstance(value, Mapping):
            current = merged.get(key)
            merged[key] = merge_settings(current if isinstance(current, Mapping) else {}, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_settings(settings: Mapping[str, object] | object) -> SettingsValidationResult:
    """Validate a full settings payload and return structured issues.

    Every section and field is required; unknown keys are rejected. Issue
    paths are dotted (``properties.max_options``) with ``<root>`` reserved
    for a payload that is not an object at all.
    """

    if not isinstance(settings, Mapping):
        issue = SettingsIssue(path="<root>", message=_type_mismatch("object", settings))
        return SettingsValidationResult(settings=None, issues=(issue,))

    issues = list(_key_issues(settings, _SCHEMA, prefix=""))
    validated: dict[str, Any] = {}
    for section in sorted(_SCHEMA):
        raw = settings.get(section)
        if raw is None:
            continue
        if not isinstance(raw, Mapping):
            issues.append(SettingsIssue(path=section, message=_type_mismatch("object", raw)))
            continue
        fields = _SCHEMA[section]
        issues.extend(_key_issues(raw, fields, prefix=section))
        accepted: dict[str, Any] = {}
        for name in sorted(fields):
            if name not in raw:
                continue
            value, problem = fields[name].parse(raw[name])
            if problem is None:
                accepted[name] = value
            else:
                issues.append(SettingsIssue(path=f"{section}.{name}", message=problem))
        validated[section] = accepted

    version = validated.get("meta", {}).get("schema_version")
    if version is not None and version != SETTINGS_SCHEMA_VERSION:
        issues.append(SettingsIssue(path="meta.schema_version", message=migration_guidance(version)))

    if issues:
        return SettingsValidationResult(settings=None, issues=tuple(issues))
    return SettingsValidationResult(settings=validated, issues=())


def assert_valid_settings(settings: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate settings and raise ``SettingsValidationError`` on failure."""

    result = validate_settings(settings)
    if result.settings is None:
        raise SettingsValidationError(result.issues)
    return result.settings


@dataclass(frozen=True, slots=True)
class _FieldRule:
    """Either a bounded integer or one string out of a fixed set of choices."""

    minimum: int = 1
    choices: tuple[str, ...] = ()

    def parse(self, value: object) -> tuple[object, str | None]:
        if self.choices:
            if not isinstance(value, str):
                return None, _type_mismatch("string", value)
            text = value.strip()
            if not text:
                return None, "must not be empty"
            if text not in self.choices:
                expected = ", ".join(sorted(self.choices))
                return None, f"invalid value {text!r}; expected one of: {expected}"
            return text, None
        if isinstance(value, bool) or not isinstance(value, int):
            return None, _type_mismatch("integer", value)
        if value < self.minimum:
            return None, f"must be >= {self.minimum}"
        return value, None


_SCHEMA: Final[Mapping[str, Mapping[str, _FieldRule]]] = MappingProxyType(
    {
        "meta": {"schema_version": _FieldRule()},
        "validation": {
            "default_profile": _FieldRule(choices=tuple(item.value for item in ValidationProfile)),
            "min_tool_description_length": _FieldRule(minimum=0),
            "max_iterations_warning_threshold": _FieldRule(),
            "max_top_k_warning_threshold": _FieldRule(),
        },
        "properties": {
            "search_max_results": _FieldRule(),
            "max_options": _FieldRule(),
            "max_tree_depth": _FieldRule(),
            "essentials_total_limit": _FieldRule(),
        },
        "observability": {
            "log_level": _FieldRule(choices=LOG_LEVELS),
            "log_format": _FieldRule(choices=LOG_FORMATS),
        },
    }
)


def _key_issues(
    payload: Mapping[object, object], expected: Mapping[str, object], *, prefix: str
) -> Iterator[SettingsIssue]:
    def dotted(key: object) -> str:
        return f"{prefix}.{key}" if prefix else str(key)

    for key in sorted(payload, key=str):
        if key not in expected:
            yield SettingsIssue(path=dotted(key), message="unknown field")
    for key in sorted(expected):
        if key not in payload:
            yield SettingsIssue(path=dotted(key), message="missing required field")


def _type_mismatch(expected: str, value: object) -> str:
    return f"expected {expected}, got {type(value).__name__}"
