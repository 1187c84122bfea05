"""Unit tests for property search scoring and the simplified display projection."""

from __future__ import annotations

from nodeconfig.domain.models import PropertyDescriptor, coerce_descriptors
from nodeconfig.properties.search import (
    SCORE_DESCRIPTION,
    SCORE_EXACT_NAME,
    SCORE_NAME_SUBSTRING,
    score_property,
    search_properties,
)
from nodeconfig.properties.simplify import simplify_property
from nodeconfig.properties.tree import find_property_by_name, walk

SCHEMA: list[dict[str, object]] = [
    {"name": "apiVersion", "displayName": "API Version", "type": "string"},
    {
        "name": "settings",
        "type": "fixedCollection",
        "options": [
            {
                "name": "advanced",
                "displayName": "Advanced",
                "values": [{"name": "version", "type": "number"}],
            }
        ],
    },
    {"name": "mode", "type": "string", "description": "Choose the API version behaviour"},
]


def test_walk_yields_nested_paths() -> None:
    paths = [entry.path for entry in walk(coerce_descriptors(SCHEMA))]
    assert paths == ["apiVersion", "settings", "settings.advanced.version", "mode"]
    assert find_property_by_name(coerce_descriptors(SCHEMA), "version") is not None


def test_scoring_tiers() -> None:
    assert score_property(PropertyDescriptor(name="version"), "version") == SCORE_EXACT_NAME
    assert score_property(PropertyDescriptor(name="apiVersion"), "version") == SCORE_NAME_SUBSTRING
    assert (
        score_property(PropertyDescriptor(name="mode", description="API version"), "version")
        == SCORE_DESCRIPTION
    )
    assert score_property(PropertyDescriptor(name="mode"), "version") == 0


def test_search_ranks_exact_nested_match_first() -> None:
    results = search_properties(SCHEMA, "Version")

    assert [prop.name for prop in results] == ["version", "apiVersion", "mode"]
    assert results[0].path == "settings.advanced.version"
    assert results[1].path == "apiVersion"


def test_search_keeps_tree_order_for_equal_scores() -> None:
    schema = [
        {"name": "maxLimit", "type": "number"},
        {
            "name": "options",
            "type": "collection",
            "options": [{"name": "rateLimit", "type": "number"}],
        },
        {"name": "pageLimit", "type": "number"},
        {"name": "limit", "type": "number"},
    ]

    results = search_properties(schema, "limit")

    assert [prop.path for prop in results] == [
        "limit",
        "maxLimit",
        "options.rateLimit",
        "pageLimit",
    ]


def test_search_finds_api_version_inside_a_collection() -> None:
    schema = [
        {"name": "authentication", "type": "options"},
        {
            "name": "additionalFields",
            "type": "collection",
            "options": [{"name": "apiVersion", "displayName": "API Version", "type": "string"}],
        },
    ]

    results = search_properties(schema, "version")

    assert [(prop.name, prop.path) for prop in results] == [
        ("apiVersion", "additionalFields.apiVersion")
    ]


def test_search_edge_cases() -> None:
    assert search_properties(SCHEMA, "") == []
    assert search_properties(SCHEMA, "   ") == []
    assert search_properties([], "version") == []
    assert len(search_properties(SCHEMA, "version", max_results=1)) == 1


def test_simplify_description_fallbacks() -> None:
    assert simplify_property(PropertyDescriptor(name="jsonBody")).description == (
        "JSON data to send in the request body"
    )
    assert simplify_property(PropertyDescriptor(name="myTimeoutMs")).description == (
        "Request timeout in milliseconds"
    )
    assert simplify_property(PropertyDescriptor(name="retries", type="boolean")).description == (
        "Enable or disable retries"
    )
    assert simplify_property(
        PropertyDescriptor(name="x", description="Explicit", hint="ignored")
    ).description == "Explicit"


def test_simplify_caps_options_and_drops_structured_defaults() -> None:
    descriptor = PropertyDescriptor.from_mapping(
        {
            "name": "region",
            "type": "options",
            "default": "r0",
            "options": [{"name": f"Region {i}", "value": f"r{i}"} for i in range(30)],
        }
    )
    assert descriptor is not None
    simplified = simplify_property(descriptor, max_options=5)

    assert simplified.options is not None
    assert len(simplified.options) == 5
    assert simplified.options[0].value == "r0"
    assert simplified.has_default is True

    collection = PropertyDescriptor(name="extra", type="collection", default={})
    assert simplify_property(collection).has_default is False


def test_usage_hints_and_show_when() -> None:
    url = simplify_property(PropertyDescriptor(name="url"))
    assert url.usage_hint == "Enter the full URL including https://"

    descriptor = PropertyDescriptor.from_mapping(
        {"name": "body", "displayOptions": {"show": {"sendBody": [True]}}}
    )
    assert descriptor is not None
    assert simplify_property(descriptor).show_when == {"sendBody": (True,)}
