"""Node type normalization between API (full) and catalog (short) forms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from nodeconfig.constants import NODE_TYPE_PREFIXES


class NodePackage(StrEnum):
    BASE = "base"
    LANGCHAIN = "langchain"
    COMMUNITY = "community"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class NodeTypeInfo:
    """Normalization outcome for a single node type string."""

    original: str
    normalized: str
    package: NodePackage

    @property
    def was_normalized(self) -> bool:
        return self.original != self.normalized

    @property
    def short_name(self) -> str:
        return extract_node_name(self.normalized)


def normalize_node_type(node_type: str) -> str:
    """Return the short catalog form (``nodes-base.x``) of ``node_type``.

    Short forms and community node types are returned unchanged.
    """

    if not isinstance(node_type, str):
        return node_type
    for full_prefix, short_prefix in NODE_TYPE_PREFIXES:
        if node_type.startswith(full_prefix):
            return short_prefix + node_type[len(full_prefix) :]
    return node_type


def expand_node_type(node_type: str) -> str:
    """Return the full API form of a short catalog node type."""

    if not isinstance(node_type, str):
        return node_type
    if node_type.startswith("nodes-base."):
        return "n8n-nodes-base." + node_type[len("nodes-base.") :]
    if node_type.startswith("nodes-langchain."):
        return "@n8n/n8n-nodes-langchain." + node_type[len("nodes-langchain.") :]
    return node_type


def extract_node_name(node_type: str) -> str:
    """Return the trailing name segment (``httpRequest`` for ``nodes-base.httpRequest``)."""

    if not node_type:
        return node_type
    tail = node_type.rsplit(".", 1)[-1]
    return tail or node_type


def detect_package(node_type: str) -> NodePackage:
    normalized = normalize_node_type(node_type)
    if normalized.startswith("nodes-base."):
        return NodePackage.BASE
    if normalized.startswith("nodes-langchain."):
        return NodePackage.LANGCHAIN
    if "." in normalized:
        return NodePackage.COMMUNITY
    return NodePackage.UNKNOWN


def describe_node_type(node_type: str) -> NodeTypeInfo:
    return NodeTypeInfo(
        original=node_type,
        normalized=normalize_node_type(node_type),
        package=detect_package(node_type),
    )


__all__ = [
    "NodePackage",
    "NodeTypeInfo",
    "describe_node_type",
    "detect_package",
    "expand_node_type",
    "extract_node_name",
    "normalize_node_type",
]
