"""
nodeconfig — validation engine façade.

File: src/nodeconfig/validation/engine.py

Purpose
- Run one complete validation pass over a node configuration and assemble the
  verdict: defaults, operation context, property filtering, structural checks,
  node-kind checks, tool sub-node checks and profile filtering.

Functional requirements
- Caller errors (wrong argument types, unknown profile/mode) raise.
- Problems in the configuration itself always become issues.
- The caller's configuration mapping is never mutated.

Non-functional requirements
- Deterministic output for identical inputs; debug-level structured log per call.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nodeconfig.constants import MAX_DESCRIPTOR_DEPTH
from nodeconfig.domain.models import (
    PropertyDescriptor,
    Unit,
    ValidationIssue,
    ValidationMode,
    ValidationProfile,
    ValidationReport,
    coerce_descriptors,
)
from nodeconfig.domain.node_types import extract_node_name
from nodeconfig.observability.logging import get_logger
from nodeconfig.validation.node_specific import validate_node_specific
from nodeconfig.validation.profiles import (
    apply_profile_filter,
    deduplicate_issues,
    generate_next_steps,
    rules_for,
)
from nodeconfig.validation.structural import filter_properties_by_mode, validate_structure
from nodeconfig.validation.tool_validators import (
    DEFAULT_TOOL_SETTINGS,
    is_tool_node_type,
    validate_tool_unit,
)
from nodeconfig.validation.visibility import (
    apply_defaults,
    extract_operation_context,
    get_visibility_requirement,
    is_property_visible,
    partition_by_visibility,
)

if TYPE_CHECKING:
    from nodeconfig.config.schema import EngineSettings

_logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class VisibilityEntry:
    name: str
    display_name: str
    visible: bool
    requirement: str | None = None


def _check_arguments(node_type: object, config: object, descriptors: object) -> None:
    if not isinstance(node_type, str):
        raise TypeError(f"node_type must be a string, got {type(node_type).__name__}")
    if not isinstance(config, Mapping):
        raise TypeError(f"config must be a mapping, got {type(config).__name__}")
    if isinstance(descriptors, (str, bytes)) or not isinstance(descriptors, Sequence):
        raise TypeError(f"descriptors must be a sequence, got {type(descriptors).__name__}")


def _resolve_mode(mode: str | ValidationMode | None, fallback: ValidationMode) -> ValidationMode:
    if mode is None:
        return fallback
    if isinstance(mode, ValidationMode):
        return mode
    try:
        return ValidationMode(str(mode).strip().lower())
    except ValueError:
        choices = ", ".join(item.value for item in ValidationMode)
        raise ValueError(f"unknown validation mode {mode!r}; expected one of: {choices}") from None


def _stamp(issues: Sequence[ValidationIssue], unit: Unit | None) -> list[ValidationIssue]:
    if unit is None:
        return list(issues)
    return [
        dataclasses.replace(
            issue,
            unit_id=issue.unit_id if issue.unit_id is not None else unit.id,
            unit_name=issue.unit_name if issue.unit_name is not None else (unit.name or None),
        )
        for issue in issues
    ]


def validate_node(
    node_type: str,
    config: Mapping[str, object],
    descriptors: Sequence[PropertyDescriptor | Mapping[str, object]],
    *,
    profile: str | ValidationProfile | None = None,
    mode: str | ValidationMode | None = None,
    unit: Unit | None = None,
    settings: EngineSettings | None = None,
) -> ValidationReport:
    """Validate ``config`` for a node of ``node_type`` described by ``descriptors``.

    ``profile`` defaults to the settings' default profile (``runtime`` without
    settings). ``mode`` overrides the profile's property filter. ``unit``
    supplies identity and credentials for tool sub-node checks.
    """

    _check_arguments(node_type, config, descriptors)
    if profile is None:
        profile = settings.default_profile if settings is not None else ValidationProfile.RUNTIME
    rules = rules_for(profile)
    selected_mode = _resolve_mode(mode, rules.property_mode)
    max_depth = settings.max_tree_depth if settings is not None else MAX_DESCRIPTOR_DEPTH

    parsed = coerce_descriptors(descriptors, max_depth=max_depth)
    context = extract_operation_context(config)
    user_keys = frozenset(config)
    # Every profile judges visibility and presence against the defaults-filled snapshot.
    effective = apply_defaults(parsed, config)

    selected = filter_properties_by_mode(parsed, effective, selected_mode, context)
    structural = validate_structure(selected, effective, user_keys)
    visible_names, hidden_names = partition_by_visibility(parsed, effective)

    issues: list[ValidationIssue] = list(structural.issues)
    suggestions: list[str] = []
    autofix: dict[str, object] = {}

    if rules.node_specific:
        specific = validate_node_specific(node_type, config)
        issues.extend(specific.issues)
        suggestions.extend(specific.suggestions)
        autofix.update(specific.autofix)

    if rules.tool_validators and is_tool_node_type(node_type):
        tool_unit = _tool_unit(node_type, config, unit)
        tool_settings = (
            settings.tool_settings() if settings is not None else DEFAULT_TOOL_SETTINGS
        )
        issues.extend(validate_tool_unit(tool_unit, node_type, tool_settings))

    kept, kept_suggestions = apply_profile_filter(_stamp(issues, unit), suggestions, rules)
    final_issues = deduplicate_issues(kept)

    report = ValidationReport(
        node_type=node_type,
        profile=rules.profile,
        mode=selected_mode,
        operation=context,
        issues=final_issues,
        suggestions=kept_suggestions,
        visible_properties=visible_names,
        hidden_properties=hidden_names,
        autofix=autofix,
        next_steps=generate_next_steps(final_issues),
    )
    _logger.debug(
        "node_validation_completed",
        node_type=node_type,
        profile=rules.profile.value,
        mode=selected_mode.value,
        descriptor_count=len(parsed),
        error_count=len(report.errors),
        warning_count=len(report.warnings),
        valid=report.valid,
    )
    return report


def _tool_unit(node_type: str, config: Mapping[str, object], unit: Unit | None) -> Unit:
    if unit is None:
        return Unit(name=extract_node_name(node_type), type=node_type, parameters=dict(config))
    return dataclasses.replace(unit, type=node_type, parameters=dict(config))


def validate_unit(
    unit: Unit,
    descriptors: Sequence[PropertyDescriptor | Mapping[str, object]],
    *,
    profile: str | ValidationProfile | None = None,
    mode: str | ValidationMode | None = None,
    settings: EngineSettings | None = None,
) -> ValidationReport:
    """Validate a workflow node instance using its own type and parameters."""

    return validate_node(
        unit.type,
        unit.parameters,
        descriptors,
        profile=profile,
        mode=mode,
        unit=unit,
        settings=settings,
    )


def inspect_visibility(
    descriptors: Sequence[PropertyDescriptor | Mapping[str, object]],
    config: Mapping[str, object],
    *,
    with_defaults: bool = True,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
) -> list[VisibilityEntry]:
    """Report, per top-level property, whether it is shown and what would show it."""

    if not isinstance(config, Mapping):
        raise TypeError(f"config must be a mapping, got {type(config).__name__}")
    parsed = coerce_descriptors(descriptors, max_depth=max_depth)
    effective = apply_defaults(parsed, config) if with_defaults else dict(config)

    entries: list[VisibilityEntry] = []
    for descriptor in parsed:
        visible = is_property_visible(descriptor, effective)
        entries.append(
            VisibilityEntry(
                name=descriptor.name,
                display_name=descriptor.label,
                visible=visible,
                requirement=None if visible else get_visibility_requirement(descriptor, effective),
            )
        )
    return entries


__all__ = [
    "VisibilityEntry",
    "inspect_visibility",
    "validate_node",
    "validate_unit",
]
