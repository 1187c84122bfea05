"""
nodeconfig — domain layer.

File: src/nodeconfig/domain/__init__.py

Purpose
- Value types shared by validation, property views and the CLI: descriptors,
  issues, reports, units and node type identifiers.

Functional requirements
- Domain objects are immutable and serializable to JSON-shaped dictionaries.
- No IO side effects.
"""

from nodeconfig.domain.models import (
    DisplayOptions,
    EssentialsConfig,
    FilteredProperties,
    IssueCategory,
    OperationContext,
    OptionGroup,
    PropertyDescriptor,
    PropertyType,
    Severity,
    SimplifiedOption,
    SimplifiedProperty,
    Unit,
    ValidationIssue,
    ValidationMode,
    ValidationProfile,
    ValidationReport,
    coerce_descriptors,
)
from nodeconfig.domain.node_types import (
    NodePackage,
    NodeTypeInfo,
    describe_node_type,
    detect_package,
    expand_node_type,
    extract_node_name,
    normalize_node_type,
)

__all__ = [
    "DisplayOptions",
    "EssentialsConfig",
    "FilteredProperties",
    "IssueCategory",
    "NodePackage",
    "NodeTypeInfo",
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
    "describe_node_type",
    "detect_package",
    "expand_node_type",
    "extract_node_name",
    "normalize_node_type",
]
