"""Scored text search over full (unflattened) property descriptor trees."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final

from nodeconfig.constants import DEFAULT_SEARCH_RESULTS, MAX_DESCRIPTOR_DEPTH, MAX_SIMPLIFIED_OPTIONS
from nodeconfig.domain.models import PropertyDescriptor, SimplifiedProperty, coerce_descriptors
from nodeconfig.observability.logging import get_logger
from nodeconfig.properties.simplify import simplify_property
from nodeconfig.properties.tree import walk

_logger = get_logger(__name__)

SCORE_EXACT_NAME: Final[int] = 10
SCORE_NAME_PREFIX: Final[int] = 8
SCORE_NAME_SUBSTRING: Final[int] = 5
SCORE_DISPLAY_NAME: Final[int] = 4
SCORE_DESCRIPTION: Final[int] = 3


def score_property(descriptor: PropertyDescriptor, query: str) -> int:
    """Score one descriptor against a lowercase query; zero means no match.

    Display-name and description hits only raise a weaker name score, they never stack.
    """

    name = descriptor.name.lower()
    score = 0
    if name == query:
        score = SCORE_EXACT_NAME
    elif name.startswith(query):
        score = SCORE_NAME_PREFIX
    elif query in name:
        score = SCORE_NAME_SUBSTRING

    if descriptor.display_name and query in descriptor.display_name.lower():
        score = max(score, SCORE_DISPLAY_NAME)
    if descriptor.description and query in descriptor.description.lower():
        score = max(score, SCORE_DESCRIPTION)
    return score


def search_properties(
    descriptors: Sequence[PropertyDescriptor | Mapping[str, object]] | None,
    query: str,
    max_results: int = DEFAULT_SEARCH_RESULTS,
    *,
    max_options: int = MAX_SIMPLIFIED_OPTIONS,
    max_depth: int = MAX_DESCRIPTOR_DEPTH,
) -> list[SimplifiedProperty]:
    """Return matching properties, best first, each tagged with its dot-path."""

    if not descriptors or not query or not query.strip():
        return []

    lowered = query.lower()
    matches: list[tuple[int, str, PropertyDescriptor]] = []
    for entry in walk(coerce_descriptors(descriptors, max_depth=max_depth), max_depth=max_depth):
        score = score_property(entry.descriptor, lowered)
        if score > 0:
            matches.append((score, entry.path, entry.descriptor))

    matches.sort(key=lambda item: item[0], reverse=True)
    results = [
        simplify_property(descriptor, path=path, max_options=max_options)
        for _, path, descriptor in matches[: max(max_results, 0)]
    ]
    _logger.debug(
        "property_search_completed",
        query=query,
        match_count=len(matches),
        returned=len(results),
    )
    return results


__all__ = [
    "SCORE_DESCRIPTION",
    "SCORE_DISPLAY_NAME",
    "SCORE_EXACT_NAME",
    "SCORE_NAME_PREFIX",
    "SCORE_NAME_SUBSTRING",
    "score_property",
    "search_properties",
]
