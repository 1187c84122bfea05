"""Property views: tree traversal, simplification, essentials and search."""

from nodeconfig.properties.essentials import (
    ESSENTIAL_PROPERTIES,
    deduplicate_properties,
    get_essentials,
    has_curated_essentials,
)
from nodeconfig.properties.search import score_property, search_properties
from nodeconfig.properties.simplify import (
    FIELD_DESCRIPTIONS,
    extract_description,
    generate_description,
    generate_usage_hint,
    simplify_property,
)
from nodeconfig.properties.tree import TreeEntry, find_property_by_name, walk

__all__ = [
    "ESSENTIAL_PROPERTIES",
    "FIELD_DESCRIPTIONS",
    "TreeEntry",
    "deduplicate_properties",
    "extract_description",
    "find_property_by_name",
    "generate_description",
    "generate_usage_hint",
    "get_essentials",
    "has_curated_essentials",
    "score_property",
    "search_properties",
    "simplify_property",
    "walk",
]
