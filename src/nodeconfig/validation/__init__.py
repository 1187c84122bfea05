"""Validation entrypoints: the engine façade plus its rule modules."""

from nodeconfig.validation.engine import (
    VisibilityEntry,
    inspect_visibility,
    validate_node,
    validate_unit,
)
from nodeconfig.validation.expressions import (
    contains_expression,
    is_expression,
    should_skip_literal_validation,
)
from nodeconfig.validation.node_specific import has_node_validator, validate_node_specific
from nodeconfig.validation.profiles import (
    PROFILE_RULES,
    ProfileRules,
    apply_profile_filter,
    deduplicate_issues,
    rules_for,
    select_profile,
)
from nodeconfig.validation.structural import filter_properties_by_mode, validate_structure
from nodeconfig.validation.tool_validators import (
    TOOL_VALIDATORS,
    ToolKind,
    ToolValidationSettings,
    is_tool_node_type,
    validate_tool_unit,
)
from nodeconfig.validation.visibility import (
    apply_defaults,
    extract_operation_context,
    get_visibility_requirement,
    is_property_relevant,
    is_property_visible,
    partition_by_visibility,
    values_match,
)

__all__ = [
    "PROFILE_RULES",
    "TOOL_VALIDATORS",
    "ProfileRules",
    "ToolKind",
    "ToolValidationSettings",
    "VisibilityEntry",
    "apply_defaults",
    "apply_profile_filter",
    "contains_expression",
    "deduplicate_issues",
    "extract_operation_context",
    "filter_properties_by_mode",
    "get_visibility_requirement",
    "has_node_validator",
    "inspect_visibility",
    "is_expression",
    "is_property_relevant",
    "is_property_visible",
    "is_tool_node_type",
    "partition_by_visibility",
    "rules_for",
    "select_profile",
    "should_skip_literal_validation",
    "validate_node",
    "validate_node_specific",
    "validate_structure",
    "validate_tool_unit",
    "validate_unit",
    "values_match",
]
