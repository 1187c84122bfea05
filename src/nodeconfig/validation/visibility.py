"""
nodeconfig — property visibility and operation-aware relevance.

File: src/nodeconfig/validation/visibility.py

Purpose
- Decide whether a property is shown for a configuration snapshot, and whether it
  belongs to the currently selected resource/operation/action variant.

Functional requirements
- ``show`` rules: AND across fields, OR within each field's value list.
- ``hide`` rules: any matching field hides; hide rules never grant visibility.
- Missing config keys are "unset" and never match any expected value.
- Defaults application never overwrites explicit values, including ``None``.

Non-functional requirements
- Pure functions, no logging on the hot path, no I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Final

from nodeconfig.domain.models import (
    ConfigSnapshot,
    OperationContext,
    PropertyDescriptor,
    coerce_descriptors,
)

_UNSET: Final[object] = object()
_RELEVANCE_FIELDS: Final[tuple[str, ...]] = ("resource", "operation", "action")


def values_match(actual: object, expected: object) -> bool:
    """Strict equality: booleans only match booleans, unset matches nothing."""

    if actual is _UNSET:
        return False
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    return bool(actual == expected)


def _contains(expected: Iterable[object], actual: object) -> bool:
    return any(values_match(actual, candidate) for candidate in expected)


def is_property_visible(descriptor: PropertyDescriptor, config: ConfigSnapshot) -> bool:
    """Return whether ``descriptor`` is displayed for ``config``."""

    rules = descriptor.display_options
    if rules is None:
        return True

    for field_name, expected in rules.show.items():
        if not _contains(expected, config.get(field_name, _UNSET)):
            return False

    for field_name, expected in rules.hide.items():
        if _contains(expected, config.get(field_name, _UNSET)):
            return False

    return True


def is_property_relevant(
    descriptor: PropertyDescriptor,
    config: ConfigSnapshot,
    context: OperationContext,
) -> bool:
    """Return whether a visible property applies to the selected operation variant."""

    if not is_property_visible(descriptor, config):
        return False
    if context.is_empty:
        return True

    rules = descriptor.display_options
    if rules is None or not rules.show:
        return True

    for field_name in _RELEVANCE_FIELDS:
        selected = getattr(context, field_name)
        if not selected:
            continue
        expected = rules.show.get(field_name)
        if expected is None:
            continue
        if not _contains(expected, selected):
            return False
    return True


def extract_operation_context(config: ConfigSnapshot) -> OperationContext:
    """Copy the resource/operation/action/mode discriminators without coercion."""

    return OperationContext(
        resource=config.get("resource"),  # type: ignore[arg-type]
        operation=config.get("operation"),  # type: ignore[arg-type]
        action=config.get("action"),  # type: ignore[arg-type]
        mode=config.get("mode"),  # type: ignore[arg-type]
    )


def apply_defaults(
    descriptors: Iterable[PropertyDescriptor | Mapping[str, object]],
    config: ConfigSnapshot,
) -> dict[str, object]:
    """Return a new snapshot with top-level defaults filled in for unset names."""

    result = dict(config)
    for descriptor in coerce_descriptors(descriptors):
        if descriptor.has_default and descriptor.name not in result:
            result[descriptor.name] = descriptor.default
    return result


def get_visibility_requirement(
    descriptor: PropertyDescriptor | None,
    config: ConfigSnapshot,
) -> str | None:
    """Explain which ``show`` conditions currently keep ``descriptor`` hidden."""

    if descriptor is None or descriptor.display_options is None:
        return None
    show = descriptor.display_options.show
    if not show:
        return None

    requirements: list[str] = []
    for field_name, expected in show.items():
        if _contains(expected, config.get(field_name, _UNSET)):
            continue
        rendered = " or ".join(f'"{_render(value)}"' for value in expected)
        requirements.append(f"{field_name}={rendered}")

    if not requirements:
        return None
    return f"Requires: {', '.join(requirements)}"


def partition_by_visibility(
    descriptors: Iterable[PropertyDescriptor],
    config: ConfigSnapshot,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split descriptor names into ``(visible, hidden)`` preserving order."""

    visible: list[str] = []
    hidden: list[str] = []
    for descriptor in descriptors:
        if is_property_visible(descriptor, config):
            visible.append(descriptor.name)
        else:
            hidden.append(descriptor.name)
    return tuple(visible), tuple(hidden)


def _render(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = [
    "apply_defaults",
    "extract_operation_context",
    "get_visibility_requirement",
    "is_property_relevant",
    "is_property_visible",
    "partition_by_visibility",
    "values_match",
]
