"""
nodeconfig — essential property extraction.

File: src/nodeconfig/properties/essentials.py

Purpose
- Reduce a node's 100-300 entry property list to a short required + common view.

What should be included in this file
- Curated essentials for the most used node types.
- Deduplication of properties repeated across partially overlapping schema fragments.
- Heuristic inference for node types without a curated entry.

Functional requirements
- Never return a property absent from the supplied descriptor tree.
- Required and common results are disjoint by name.

Non-functional requirements
- Deterministic output order: curated list order, else schema order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Final

from nodeconfig.constants import (
    ESSENTIALS_REQUIRED_FLOOR,
    ESSENTIALS_TOTAL_LIMIT,
    INFERRED_BACKFILL_TARGET,
    INFERRED_COMMON_LIMIT,
    INFERRED_REQUIRED_LIMIT,
    MAX_DESCRIPTOR_DEPTH,
    MAX_SIMPLIFIED_OPTIONS,
)
from nodeconfig.domain.models import (
    EssentialsConfig,
    FilteredProperties,
    PropertyDescriptor,
    PropertyType,
    SimplifiedProperty,
    coerce_descriptors,
)
from nodeconfig.domain.node_types import normalize_node_type
from nodeconfig.observability.logging import get_logger
from nodeconfig.properties.simplify import simplify_property
from nodeconfig.properties.tree import find_property_by_name

_logger = get_logger(__name__)


def _curated(required: tuple[str, ...], common: tuple[str, ...]) -> EssentialsConfig:
    return EssentialsConfig(required=required, common=common)


ESSENTIAL_PROPERTIES: Final[Mapping[str, EssentialsConfig]] = MappingProxyType(
    {
        "nodes-base.httpRequest": _curated(
            ("url",), ("method", "authentication", "sendBody", "contentType", "sendHeaders")
        ),
        "nodes-base.webhook": _curated(
            (), ("httpMethod", "path", "responseMode", "responseData", "responseCode")
        ),
        "nodes-base.code": _curated((), ("language", "jsCode", "pythonCode", "mode")),
        "nodes-base.set": _curated((), ("mode", "assignments", "includeOtherFields", "options")),
        "nodes-base.if": _curated((), ("conditions", "combineOperation")),
        "nodes-base.postgres": _curated(
            (), ("operation", "table", "query", "additionalFields", "returnAll")
        ),
        "nodes-base.openAi": _curated(
            (), ("resource", "operation", "modelId", "prompt", "messages", "maxTokens")
        ),
        "nodes-base.googleSheets": _curated(
            (), ("operation", "documentId", "sheetName", "range", "dataStartRow")
        ),
        "nodes-base.slack": _curated(
            (), ("resource", "operation", "channel", "text", "attachments", "blocks")
        ),
        "nodes-base.email": _curated(
            (),
            ("resource", "operation", "fromEmail", "toEmail", "subject", "text", "html"),
        ),
        "nodes-base.merge": _curated(
            (), ("mode", "joinMode", "propertyName1", "propertyName2", "outputDataFrom")
        ),
        "nodes-base.function": _curated((), ("functionCode",)),
        "nodes-base.splitInBatches": _curated((), ("batchSize", "options")),
        "nodes-base.redis": _curated((), ("operation", "key", "value", "keyType", "expire")),
        "nodes-base.mongoDb": _curated(
            (), ("operation", "collection", "query", "fields", "limit")
        ),
        "nodes-base.mySql": _curated(
            (), ("operation", "table", "query", "columns", "additionalFields")
        ),
        "nodes-base.ftp": _curated((), ("operation", "path", "fileName", "binaryData")),
        "nodes-base.ssh": _curated((), ("resource", "operation", "command", "path", "cwd")),
        "nodes-base.executeCommand": _curated((), ("command", "cwd")),
        "nodes-base.github": _curated(
            (), ("resource", "operation", "owner", "repository", "title", "body")
        ),
        "nodes-base.switch": _curated((), ("rules", "dataType", "fallbackOutput")),
        "nodes-langchain.agent": _curated(
            (), ("agent", "systemMessage", "promptType", "text", "maxIterations")
        ),
    }
)


def deduplicate_properties(
    descriptors: Iterable[PropertyDescriptor],
) -> tuple[PropertyDescriptor, ...]:
    """Keep the first descriptor for each ``(name, display rules)`` pair."""

    seen: set[tuple[str, str]] = set()
    unique: list[PropertyDescriptor] = []
    for descriptor in descriptors:
        key = (descriptor.name, descriptor.display_options_key())
        if key in seen:
            continue
        seen.add(key)
        unique.append(descriptor)
    return tuple(unique)


def get_essentials(
    descriptors: Sequence[PropertyDescriptor | Mapping[str, object]] | None,
    node_type: str,
    *,
    max_options: int = MAX_SIMPLIFIED_OPTIONS,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
    total_limit: int = ESSENTIALS_TOTAL_LIMIT,
) -> FilteredProperties:
    """Return the curated or inferred required/common properties for ``node_type``."""

    if not descriptors:
        return FilteredProperties()

    unique = deduplicate_properties(coerce_descriptors(descriptors, max_depth=max_depth))
    normalized = normalize_node_type(node_type)
    curated = ESSENTIAL_PROPERTIES.get(normalized)

    if curated is None:
        result = _infer_essentials(unique, max_options=max_options, total_limit=total_limit)
        source = "inferred"
    else:
        required = _extract(
            unique,
            curated.required,
            mark_required=True,
            max_options=max_options,
            max_depth=max_depth,
        )
        required_names = {prop.name for prop in required}
        common = tuple(
            prop
            for prop in _extract(
                unique,
                curated.common,
                mark_required=False,
                max_options=max_options,
                max_depth=max_depth,
            )
            if prop.name not in required_names
        )
        result = FilteredProperties(required=required, common=common)
        source = "curated"

    _logger.debug(
        "essentials_resolved",
        node_type=normalized,
        source=source,
        input_count=len(unique),
        required_count=len(result.required),
        common_count=len(result.common),
    )
    return result


def has_curated_essentials(node_type: str) -> bool:
    return normalize_node_type(node_type) in ESSENTIAL_PROPERTIES


def _extract(
    descriptors: Sequence[PropertyDescriptor],
    names: Iterable[str],
    *,
    mark_required: bool,
    max_options: int,
    max_depth: int,
) -> tuple[SimplifiedProperty, ...]:
    extracted: list[SimplifiedProperty] = []
    for name in names:
        descriptor = find_property_by_name(descriptors, name, max_depth=max_depth)
        if descriptor is None:
            continue
        simplified = simplify_property(descriptor, max_options=max_options)
        if mark_required and not simplified.required:
            simplified = _as_required(simplified)
        extracted.append(simplified)
    return tuple(extracted)


def _as_required(prop: SimplifiedProperty) -> SimplifiedProperty:
    return SimplifiedProperty(
        name=prop.name,
        display_name=prop.display_name,
        type=prop.type,
        description=prop.description,
        required=True,
        default=prop.default,
        has_default=prop.has_default,
        options=prop.options,
        placeholder=prop.placeholder,
        show_when=prop.show_when,
        usage_hint=prop.usage_hint,
        path=prop.path,
    )


def _looks_internal(name: str) -> bool:
    return name.startswith("options") or name.startswith("_")


def _infer_essentials(
    descriptors: Sequence[PropertyDescriptor],
    *,
    max_options: int,
    total_limit: int,
) -> FilteredProperties:
    required = [
        simplify_property(item, max_options=max_options)
        for item in descriptors
        if item.required
    ][:INFERRED_REQUIRED_LIMIT]

    common = [
        simplify_property(item, max_options=max_options)
        for item in descriptors
        if not item.required
        and item.display_options is None
        and item.type not in (PropertyType.HIDDEN, PropertyType.NOTICE)
        and not _looks_internal(item.name)
    ][:INFERRED_COMMON_LIMIT]

    shortfall = INFERRED_BACKFILL_TARGET - (len(required) + len(common))
    if shortfall > 0:
        backfill = [
            item
            for item in descriptors
            if not item.required
            and item.type != PropertyType.HIDDEN
            and item.display_options is not None
            and len(item.display_options.show) == 1
        ][:shortfall]
        common.extend(simplify_property(item, max_options=max_options) for item in backfill)

    if len(required) + len(common) > total_limit:
        required_count = min(len(required), ESSENTIALS_REQUIRED_FLOOR)
        common_count = max(total_limit - required_count, 0)
        return FilteredProperties(
            required=tuple(required[:required_count]),
            common=tuple(common[:common_count]),
        )

    return FilteredProperties(required=tuple(required), common=tuple(common))


__all__ = [
    "ESSENTIAL_PROPERTIES",
    "deduplicate_properties",
    "get_essentials",
    "has_curated_essentials",
]
