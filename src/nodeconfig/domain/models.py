"""Immutable domain models for node property schemas and validation verdicts."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum, StrEnum
from typing import Final, cast

from nodeconfig.constants import MAX_DESCRIPTOR_DEPTH

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
ConfigSnapshot = Mapping[str, object]


class _Missing:
    """Marker for a schema entry that declares no ``default`` at all."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<no default>"

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, _memo: object) -> _Missing:
        return self

    def __reduce__(self) -> str:
        return "_MISSING"


_MISSING: Final[object] = _Missing()


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(StrEnum):
    MISSING_REQUIRED = "missing_required"
    INVALID_TYPE = "invalid_type"
    INVALID_VALUE = "invalid_value"
    INCOMPATIBLE = "incompatible"
    INVALID_CONFIGURATION = "invalid_configuration"
    SYNTAX_ERROR = "syntax_error"
    MISSING_COMMON = "missing_common"
    DEPRECATED = "deprecated"
    INEFFICIENT = "inefficient"
    SECURITY = "security"
    BEST_PRACTICE = "best_practice"


class ValidationMode(StrEnum):
    MINIMAL = "minimal"
    OPERATION = "operation"
    FULL = "full"


class ValidationProfile(StrEnum):
    MINIMAL = "minimal"
    RUNTIME = "runtime"
    STRICT = "strict"


class PropertyType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    MULTI_OPTIONS = "multiOptions"
    COLLECTION = "collection"
    FIXED_COLLECTION = "fixedCollection"
    JSON = "json"
    CODE = "code"
    HIDDEN = "hidden"
    NOTICE = "notice"
    RESOURCE_LOCATOR = "resourceLocator"


# ---------------------------------------------------------------------------
# Property schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DisplayOptions:
    """Conditional display rules; every value list is normalized to a tuple."""

    show: dict[str, tuple[object, ...]] = field(default_factory=dict)
    hide: dict[str, tuple[object, ...]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: object) -> DisplayOptions | None:
        if not isinstance(raw, Mapping):
            return None
        return cls(show=_condition_map(raw.get("show")), hide=_condition_map(raw.get("hide")))

    @property
    def is_empty(self) -> bool:
        return not self.show and not self.hide

    def to_dict(self) -> dict[str, JSONValue]:
        out: dict[str, JSONValue] = {}
        if self.show:
            out["show"] = {key: _plain_list(values) for key, values in self.show.items()}
        if self.hide:
            out["hide"] = {key: _plain_list(values) for key, values in self.hide.items()}
        return out


@dataclass(frozen=True, slots=True)
class OptionGroup:
    """One named value-set of a ``fixedCollection`` property."""

    name: str
    display_name: str | None
    values: tuple[PropertyDescriptor, ...]


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """One configurable field of a node, parsed from its JSON schema entry."""

    name: str
    type: str = ""
    display_name: str | None = None
    required: bool = False
    # An explicit None is a declared default; omit the argument to declare none.
    default: object = _MISSING
    options: tuple[object, ...] = ()
    placeholder: str | None = None
    description: str | None = None
    hint: str | None = None
    display_options: DisplayOptions | None = None
    children: tuple[PropertyDescriptor, ...] = ()
    groups: tuple[OptionGroup, ...] = ()

    @classmethod
    def from_mapping(
        cls,
        raw: object,
        *,
        depth: int = 0,
        max_depth: int = MAX_DESCRIPTOR_DEPTH,
    ) -> PropertyDescriptor | None:
        """Parse a schema entry; return ``None`` for entries without a usable name.

        Nested entries deeper than ``max_depth`` are dropped.
        """

        if not isinstance(raw, Mapping):
            return None
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            return None

        prop_type = raw.get("type")
        type_name = prop_type if isinstance(prop_type, str) else ""
        raw_options = raw.get("options")
        options = tuple(raw_options) if isinstance(raw_options, (list, tuple)) else ()

        children: tuple[PropertyDescriptor, ...] = ()
        groups: tuple[OptionGroup, ...] = ()
        if depth < max_depth:
            if type_name == PropertyType.COLLECTION:
                children = _parse_many(options, depth=depth + 1, max_depth=max_depth)
            elif type_name == PropertyType.FIXED_COLLECTION:
                groups = _parse_groups(options, depth=depth + 1, max_depth=max_depth)

        return cls(
            name=name,
            type=type_name,
            display_name=_optional_str(raw.get("displayName")),
            required=raw.get("required") is True,
            default=raw.get("default", _MISSING),
            options=options,
            placeholder=_optional_str(raw.get("placeholder")),
            description=_optional_str(raw.get("description")),
            hint=_optional_str(raw.get("hint")),
            display_options=DisplayOptions.from_mapping(raw.get("displayOptions")),
            children=children,
            groups=groups,
        )

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def nested(self) -> Iterable[tuple[str | None, PropertyDescriptor]]:
        """Yield ``(group_name, child)`` for collection and fixedCollection members."""

        for child in self.children:
            yield None, child
        for group in self.groups:
            for child in group.values:
                yield group.name, child

    def display_options_key(self) -> str:
        """Canonical serialization of the display rules, used for deduplication."""

        payload = self.display_options.to_dict() if self.display_options is not None else {}
        return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=repr)


def coerce_descriptors(
    items: Iterable[object] | None,
    *,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
) -> tuple[PropertyDescriptor, ...]:
    """Accept descriptors or raw schema mappings; silently skip malformed entries."""

    if items is None:
        return ()
    parsed: list[PropertyDescriptor] = []
    for item in items:
        if isinstance(item, PropertyDescriptor):
            parsed.append(item)
            continue
        descriptor = PropertyDescriptor.from_mapping(item, max_depth=max_depth)
        if descriptor is not None:
            parsed.append(descriptor)
    return tuple(parsed)


def _parse_many(
    items: Iterable[object], *, depth: int, max_depth: int
) -> tuple[PropertyDescriptor, ...]:
    parsed: list[PropertyDescriptor] = []
    for item in items:
        descriptor = PropertyDescriptor.from_mapping(item, depth=depth, max_depth=max_depth)
        if descriptor is not None:
            parsed.append(descriptor)
    return tuple(parsed)


def _parse_groups(items: Iterable[object], *, depth: int, max_depth: int) -> tuple[OptionGroup, ...]:
    groups: list[OptionGroup] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        values = item.get("values")
        if not isinstance(values, (list, tuple)):
            continue
        group_name = item.get("name")
        groups.append(
            OptionGroup(
                name=group_name if isinstance(group_name, str) else "",
                display_name=_optional_str(item.get("displayName")),
                values=_parse_many(values, depth=depth, max_depth=max_depth),
            )
        )
    return tuple(groups)


def _condition_map(raw: object) -> dict[str, tuple[object, ...]]:
    if not isinstance(raw, Mapping):
        return {}
    out: dict[str, tuple[object, ...]] = {}
    for key, values in raw.items():
        if not isinstance(key, str):
            continue
        out[key] = tuple(values) if isinstance(values, (list, tuple)) else (values,)
    return out


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _plain_list(values: tuple[object, ...]) -> list[JSONValue]:
    return [cast("JSONValue", item) for item in values]


# ---------------------------------------------------------------------------
# Operation context and property views
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OperationContext:
    """Discriminator fields selecting the active variant of a multi-operation node."""

    resource: str | None = None
    operation: str | None = None
    action: str | None = None
    mode: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.resource and not self.operation and not self.action

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            key: cast("JSONValue", getattr(self, key))
            for key in ("resource", "operation", "action", "mode")
            if getattr(self, key) is not None
        }


@dataclass(frozen=True, slots=True)
class SimplifiedOption:
    value: object
    label: object


@dataclass(frozen=True, slots=True)
class SimplifiedProperty:
    """Display-oriented projection of a :class:`PropertyDescriptor`."""

    name: str
    display_name: str
    type: str
    description: str
    required: bool = False
    default: object = None
    has_default: bool = False
    options: tuple[SimplifiedOption, ...] | None = None
    placeholder: str | None = None
    show_when: dict[str, tuple[object, ...]] | None = None
    usage_hint: str | None = None
    path: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        out: dict[str, JSONValue] = {
            "name": self.name,
            "displayName": self.display_name,
            "type": self.type,
            "description": self.description,
            "required": self.required,
        }
        if self.has_default:
            out["default"] = _serialize_value(self.default)
        if self.options is not None:
            out["options"] = [
                {"value": _serialize_value(opt.value), "label": _serialize_value(opt.label)}
                for opt in self.options
            ]
        if self.placeholder is not None:
            out["placeholder"] = self.placeholder
        if self.show_when is not None:
            out["showWhen"] = {key: _plain_list(values) for key, values in self.show_when.items()}
        if self.usage_hint is not None:
            out["usageHint"] = self.usage_hint
        if self.path is not None:
            out["path"] = self.path
        return out


@dataclass(frozen=True, slots=True)
class EssentialsConfig:
    """Curated required/common property names for a well-known node type."""

    required: tuple[str, ...] = ()
    common: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FilteredProperties:
    required: tuple[SimplifiedProperty, ...] = ()
    common: tuple[SimplifiedProperty, ...] = ()

    def names(self) -> tuple[str, ...]:
        return tuple(prop.name for prop in (*self.required, *self.common))

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "required": [prop.to_dict() for prop in self.required],
            "common": [prop.to_dict() for prop in self.common],
        }


# ---------------------------------------------------------------------------
# Validation verdicts
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Single accumulated finding; never mutated after creation."""

    severity: Severity
    message: str
    unit_id: str | None = None
    unit_name: str | None = None
    code: str | None = None
    category: IssueCategory | None = None
    property_name: str | None = None
    fix: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def with_severity(self, severity: Severity) -> ValidationIssue:
        return ValidationIssue(
            severity=severity,
            message=self.message,
            unit_id=self.unit_id,
            unit_name=self.unit_name,
            code=self.code,
            category=self.category,
            property_name=self.property_name,
            fix=self.fix,
        )

    def to_dict(self) -> dict[str, JSONValue]:
        out: dict[str, JSONValue] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            key = "property" if item.name == "property_name" else _camel(item.name)
            out[key] = _serialize_value(value)
        return out


@dataclass(frozen=True, slots=True)
class Unit:
    """A node instance: identity, type and its configuration snapshot."""

    name: str
    type: str
    parameters: dict[str, object] = field(default_factory=dict)
    credentials: dict[str, object] = field(default_factory=dict)
    id: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> Unit:
        parameters = raw.get("parameters")
        credentials = raw.get("credentials")
        name = raw.get("name")
        node_type = raw.get("type")
        node_id = raw.get("id")
        return cls(
            name=name if isinstance(name, str) else "",
            type=node_type if isinstance(node_type, str) else "",
            parameters=dict(parameters) if isinstance(parameters, Mapping) else {},
            credentials=dict(credentials) if isinstance(credentials, Mapping) else {},
            id=node_id if isinstance(node_id, str) else None,
        )


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of one validation pass over a node configuration."""

    node_type: str
    profile: ValidationProfile
    mode: ValidationMode
    operation: OperationContext
    issues: tuple[ValidationIssue, ...] = ()
    suggestions: tuple[str, ...] = ()
    visible_properties: tuple[str, ...] = ()
    hidden_properties: tuple[str, ...] = ()
    autofix: dict[str, object] = field(default_factory=dict)
    next_steps: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.is_error)

    @property
    def warnings(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.is_warning)

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "valid": self.valid,
            "nodeType": self.node_type,
            "profile": self.profile.value,
            "mode": self.mode.value,
            "operation": self.operation.to_dict(),
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "info": [
                issue.to_dict() for issue in self.issues if issue.severity is Severity.INFO
            ],
            "suggestions": list(self.suggestions),
            "visibleProperties": list(self.visible_properties),
            "hiddenProperties": list(self.hidden_properties),
            "autofix": cast("JSONValue", _serialize_value(self.autofix)),
            "nextSteps": list(self.next_steps),
        }


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _serialize_value(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Enum):
        return cast("JSONValue", value.value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _serialize_value(item) for key, item in value.items()}
    if is_dataclass(value) and not isinstance(value, type):
        return {
            _camel(item.name): _serialize_value(getattr(value, item.name))
            for item in fields(value)
        }
    return repr(value)


__all__ = [
    "ConfigSnapshot",
    "DisplayOptions",
    "EssentialsConfig",
    "FilteredProperties",
    "IssueCategory",
    "JSONValue",
    "OperationContext",
    "OptionGroup",
    "PropertyDescriptor",
    "PropertyType",
    "Severity",
    "SimplifiedOption",
    "SimplifiedProperty",
    "Unit",
    "ValidationIssue",
    "ValidationMode",
    "ValidationProfile",
    "ValidationReport",
    "coerce_descriptors",
]
