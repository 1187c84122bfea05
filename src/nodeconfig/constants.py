"""Stable constants shared across the validation and property layers."""

from __future__ import annotations

from typing import Final

# Schema version for the engine settings file.
SETTINGS_SCHEMA_VERSION: Final[int] = 1

# Tool sub-node thresholds.
MIN_TOOL_DESCRIPTION_LENGTH: Final[int] = 15
MAX_ITERATIONS_WARNING_THRESHOLD: Final[int] = 50
MAX_TOP_K_WARNING_THRESHOLD: Final[int] = 20

# Property view limits.
MAX_SIMPLIFIED_OPTIONS: Final[int] = 20
DEFAULT_SEARCH_RESULTS: Final[int] = 20
MAX_SHOW_WHEN_FIELDS: Final[int] = 2
INFERRED_REQUIRED_LIMIT: Final[int] = 10
INFERRED_COMMON_LIMIT: Final[int] = 10
INFERRED_BACKFILL_TARGET: Final[int] = 10
ESSENTIALS_TOTAL_LIMIT: Final[int] = 30
ESSENTIALS_REQUIRED_FLOOR: Final[int] = 15

# Descriptor trees are walked depth-first with this nesting bound.
MAX_DESCRIPTOR_DEPTH: Final[int] = 32

# Well-known discriminator fields that select a node's operation variant.
OPERATION_CONTEXT_FIELDS: Final[tuple[str, ...]] = ("resource", "operation", "action", "mode")

# Node type package prefixes (full API form -> short catalog form).
NODE_TYPE_PREFIXES: Final[tuple[tuple[str, str], ...]] = (
    ("n8n-nodes-base.", "nodes-base."),
    ("@n8n/n8n-nodes-langchain.", "nodes-langchain."),
    ("n8n-nodes-langchain.", "nodes-langchain."),
)

__all__ = [
    "DEFAULT_SEARCH_RESULTS",
    "ESSENTIALS_REQUIRED_FLOOR",
    "ESSENTIALS_TOTAL_LIMIT",
    "INFERRED_BACKFILL_TARGET",
    "INFERRED_COMMON_LIMIT",
    "INFERRED_REQUIRED_LIMIT",
    "MAX_DESCRIPTOR_DEPTH",
    "MAX_ITERATIONS_WARNING_THRESHOLD",
    "MAX_SHOW_WHEN_FIELDS",
    "MAX_SIMPLIFIED_OPTIONS",
    "MAX_TOP_K_WARNING_THRESHOLD",
    "MIN_TOOL_DESCRIPTION_LENGTH",
    "NODE_TYPE_PREFIXES",
    "OPERATION_CONTEXT_FIELDS",
    "SETTINGS_SCHEMA_VERSION",
]
