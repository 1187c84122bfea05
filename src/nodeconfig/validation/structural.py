"""
nodeconfig — generic structural validation of a node configuration.

File: src/nodeconfig/validation/structural.py

Purpose
- Select the descriptors a validation pass looks at (by mode) and check the
  configuration against them: required presence, literal types, enumerations
  and resource-locator shape.

Functional requirements
- Hidden descriptors are reported as hidden and never validated.
- Expression values are resolved at run time; literal checks skip them.
- Schema-supplied defaults are trusted; only user-provided keys are type checked.
- Findings are returned as ``ValidationIssue`` values; nothing raises on bad data.

Non-functional requirements
- Pure and deterministic; output order follows descriptor order, then config order.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass

from nodeconfig.domain.models import (
    ConfigSnapshot,
    IssueCategory,
    OperationContext,
    PropertyDescriptor,
    PropertyType,
    Severity,
    ValidationIssue,
    ValidationMode,
)
from nodeconfig.validation.expressions import should_skip_literal_validation
from nodeconfig.validation.visibility import (
    is_property_relevant,
    is_property_visible,
    values_match,
)


@dataclass(frozen=True, slots=True)
class StructuralResult:
    issues: tuple[ValidationIssue, ...]
    visible_properties: tuple[str, ...]
    hidden_properties: tuple[str, ...]


def filter_properties_by_mode(
    descriptors: Iterable[PropertyDescriptor],
    config: ConfigSnapshot,
    mode: ValidationMode,
    context: OperationContext,
) -> tuple[PropertyDescriptor, ...]:
    """Return the descriptors a pass in ``mode`` validates.

    ``minimal`` keeps visible required properties, ``operation`` keeps properties
    relevant to the selected operation, ``full`` keeps everything.
    """

    if mode is ValidationMode.MINIMAL:
        return tuple(
            item for item in descriptors if item.required and is_property_visible(item, config)
        )
    if mode is ValidationMode.OPERATION:
        return tuple(item for item in descriptors if is_property_relevant(item, config, context))
    return tuple(descriptors)


def validate_structure(
    descriptors: Sequence[PropertyDescriptor],
    config: ConfigSnapshot,
    user_keys: Collection[str] | None = None,
) -> StructuralResult:
    """Check ``config`` against ``descriptors``.

    ``config`` is expected to already carry defaults; ``user_keys`` names the keys
    the caller set explicitly (all keys when omitted).
    """

    issues: list[ValidationIssue] = []
    visible: list[str] = []
    hidden: list[str] = []
    shown: dict[str, PropertyDescriptor] = {}

    for descriptor in descriptors:
        if not is_property_visible(descriptor, config):
            hidden.append(descriptor.name)
            continue
        visible.append(descriptor.name)
        shown.setdefault(descriptor.name, descriptor)
        if descriptor.required:
            issue = _check_required(descriptor, config)
            if issue is not None:
                issues.append(issue)

    checked_keys = config.keys() if user_keys is None else user_keys
    for key, value in config.items():
        if key not in checked_keys:
            continue
        descriptor = shown.get(key)
        if descriptor is None or should_skip_literal_validation(value):
            continue
        issues.extend(_check_value(descriptor, key, value))

    return StructuralResult(
        issues=tuple(issues),
        visible_properties=tuple(visible),
        hidden_properties=tuple(hidden),
    )


def json_type_name(value: object) -> str:
    """Name ``value``'s JSON type the way configuration authors see it."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def option_values(descriptor: PropertyDescriptor) -> tuple[object, ...]:
    values: list[object] = []
    for option in descriptor.options:
        if isinstance(option, Mapping):
            values.append(option.get("value"))
        else:
            values.append(option)
    return tuple(values)


def _error(
    category: IssueCategory,
    property_name: str,
    message: str,
    fix: str,
) -> ValidationIssue:
    return ValidationIssue(
        severity=Severity.ERROR,
        message=message,
        category=category,
        property_name=property_name,
        fix=fix,
    )


def _check_required(
    descriptor: PropertyDescriptor, config: ConfigSnapshot
) -> ValidationIssue | None:
    name = descriptor.name
    label = descriptor.label
    if name not in config:
        return _error(
            IssueCategory.MISSING_REQUIRED,
            name,
            f"Required property '{label}' is missing",
            f"Add {name} to your configuration",
        )
    value = config[name]
    if value is None:
        return _error(
            IssueCategory.INVALID_TYPE,
            name,
            f"Required property '{label}' cannot be null or undefined",
            f"Provide a valid value for {name}",
        )
    if isinstance(value, str) and not value.strip():
        return _error(
            IssueCategory.MISSING_REQUIRED,
            name,
            f"Required property '{label}' cannot be empty",
            f"Provide a valid value for {name}",
        )
    return None


def _check_value(
    descriptor: PropertyDescriptor, key: str, value: object
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    kind = descriptor.type
    actual = json_type_name(value)

    if kind == PropertyType.STRING and not isinstance(value, str):
        issues.append(
            _error(
                IssueCategory.INVALID_TYPE,
                key,
                f"Property '{key}' must be a string, got {actual}",
                f"Change {key} to a string value",
            )
        )
    elif kind == PropertyType.NUMBER and actual != "number":
        issues.append(
            _error(
                IssueCategory.INVALID_TYPE,
                key,
                f"Property '{key}' must be a number, got {actual}",
                f"Change {key} to a number",
            )
        )
    elif kind == PropertyType.BOOLEAN and not isinstance(value, bool):
        issues.append(
            _error(
                IssueCategory.INVALID_TYPE,
                key,
                f"Property '{key}' must be a boolean, got {actual}",
                f"Change {key} to true or false",
            )
        )

    if kind == PropertyType.OPTIONS and descriptor.options:
        allowed = option_values(descriptor)
        if not any(values_match(value, candidate) for candidate in allowed):
            rendered = ", ".join(str(item) for item in allowed)
            issues.append(
                _error(
                    IssueCategory.INVALID_VALUE,
                    key,
                    f"Invalid value for '{key}'. Must be one of: {rendered}",
                    f"Change {key} to one of the valid options",
                )
            )

    if kind == PropertyType.RESOURCE_LOCATOR:
        issues.extend(_check_resource_locator(descriptor, key, value))

    return issues


def _check_resource_locator(
    descriptor: PropertyDescriptor, key: str, value: object
) -> list[ValidationIssue]:
    if not isinstance(value, Mapping):
        return [
            _error(
                IssueCategory.INVALID_TYPE,
                key,
                f"Property '{key}' is a resourceLocator and must be an object "
                "with 'mode' and 'value' properties",
                f'Change {key} to {{ mode: "list", value: "..." }}',
            )
        ]
    issues: list[ValidationIssue] = []
    if not value.get("mode"):
        issues.append(
            _error(
                IssueCategory.MISSING_REQUIRED,
                f"{key}.mode",
                f"resourceLocator '{key}' is missing required property 'mode'",
                'Add mode property: { mode: "list", value: "..." }',
            )
        )
    if "value" not in value:
        issues.append(
            _error(
                IssueCategory.MISSING_REQUIRED,
                f"{key}.value",
                f"resourceLocator '{key}' is missing required property 'value'",
                f"Add value property to specify the {descriptor.label}",
            )
        )
    return issues


__all__ = [
    "StructuralResult",
    "filter_properties_by_mode",
    "json_type_name",
    "option_values",
    "validate_structure",
]
