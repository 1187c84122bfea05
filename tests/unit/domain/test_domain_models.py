"""
nodeconfig — unit tests for domain models and node type identifiers

File: tests/unit/domain/test_domain_models.py

Purpose
- Validate descriptor parsing (malformed entries, nesting, depth bound), issue and
  report serialization, and node type normalization.
"""

from __future__ import annotations

import json

import pytest

from nodeconfig.domain import node_types
from nodeconfig.domain.models import (
    IssueCategory,
    OperationContext,
    PropertyDescriptor,
    Severity,
    Unit,
    ValidationIssue,
    ValidationMode,
    ValidationProfile,
    ValidationReport,
    coerce_descriptors,
)


def _nested(depth: int) -> dict[str, object]:
    node: dict[str, object] = {"name": f"leaf{depth}", "type": "string"}
    for level in range(depth):
        node = {"name": f"level{level}", "type": "collection", "options": [node]}
    return node


def test_from_mapping_skips_entries_without_name() -> None:
    assert PropertyDescriptor.from_mapping({"type": "string"}) is None
    assert PropertyDescriptor.from_mapping({"name": "", "type": "string"}) is None
    assert PropertyDescriptor.from_mapping("url") is None

    parsed = coerce_descriptors([{"type": "string"}, {"name": "url"}, 42, None])
    assert [item.name for item in parsed] == ["url"]


def test_from_mapping_distinguishes_absent_and_null_default() -> None:
    absent = PropertyDescriptor.from_mapping({"name": "a", "type": "string"})
    explicit_null = PropertyDescriptor.from_mapping({"name": "b", "type": "string", "default": None})

    assert absent is not None and explicit_null is not None
    assert absent.has_default is False
    assert explicit_null.has_default is True
    assert explicit_null.default is None


def test_display_options_single_values_become_tuples() -> None:
    descriptor = PropertyDescriptor.from_mapping(
        {
            "name": "channel",
            "displayOptions": {"show": {"resource": "message"}, "hide": {"mode": ["raw"]}},
        }
    )
    assert descriptor is not None
    assert descriptor.display_options is not None
    assert descriptor.display_options.show == {"resource": ("message",)}
    assert descriptor.display_options.hide == {"mode": ("raw",)}


def test_collection_and_fixed_collection_children_are_parsed() -> None:
    descriptor = PropertyDescriptor.from_mapping(
        {
            "name": "options",
            "type": "fixedCollection",
            "options": [
                {"name": "headers", "values": [{"name": "key"}, {"name": "value"}]},
                {"name": "broken"},
            ],
        }
    )
    assert descriptor is not None
    assert [group.name for group in descriptor.groups] == ["headers"]
    assert [(group, child.name) for group, child in descriptor.nested()] == [
        ("headers", "key"),
        ("headers", "value"),
    ]


def test_nesting_beyond_depth_limit_is_dropped() -> None:
    parsed = coerce_descriptors([_nested(5)], max_depth=2)
    top = parsed[0]
    assert top.name == "level4"
    assert top.children[0].name == "level3"
    assert top.children[0].children[0].name == "level2"
    assert top.children[0].children[0].children == ()


def test_display_options_key_is_order_independent() -> None:
    first = PropertyDescriptor.from_mapping(
        {"name": "x", "displayOptions": {"show": {"a": [1], "b": [2]}}}
    )
    second = PropertyDescriptor.from_mapping(
        {"name": "x", "displayOptions": {"show": {"b": [2], "a": [1]}}}
    )
    assert first is not None and second is not None
    assert first.display_options_key() == second.display_options_key()


def test_validation_issue_serializes_without_empty_fields() -> None:
    issue = ValidationIssue(
        severity=Severity.ERROR,
        message="Required property 'URL' is missing",
        code=None,
        category=IssueCategory.MISSING_REQUIRED,
        property_name="url",
        fix="Add url to your configuration",
    )
    payload = issue.to_dict()

    assert payload == {
        "severity": "error",
        "message": "Required property 'URL' is missing",
        "category": "missing_required",
        "property": "url",
        "fix": "Add url to your configuration",
    }
    assert issue.with_severity(Severity.WARNING).is_warning


def test_report_splits_issues_by_severity_and_is_json_safe() -> None:
    report = ValidationReport(
        node_type="nodes-base.httpRequest",
        profile=ValidationProfile.RUNTIME,
        mode=ValidationMode.OPERATION,
        operation=OperationContext(operation="get"),
        issues=(
            ValidationIssue(severity=Severity.WARNING, message="w"),
            ValidationIssue(severity=Severity.INFO, message="i"),
        ),
        autofix={"sendBody": True},
    )

    assert report.valid is True
    payload = report.to_dict()
    assert [item["message"] for item in payload["warnings"]] == ["w"]
    assert [item["message"] for item in payload["info"]] == ["i"]
    assert payload["errors"] == []
    assert payload["operation"] == {"operation": "get"}
    json.dumps(payload)


def test_operation_context_is_empty_ignores_mode() -> None:
    assert OperationContext(mode="raw").is_empty is True
    assert OperationContext(action="send").is_empty is False


def test_unit_from_mapping_tolerates_missing_sections() -> None:
    unit = Unit.from_mapping({"name": "Fetch", "type": "nodes-base.httpRequest", "id": "n1"})
    assert unit.parameters == {}
    assert unit.credentials == {}
    assert unit.id == "n1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("n8n-nodes-base.httpRequest", "nodes-base.httpRequest"),
        ("@n8n/n8n-nodes-langchain.agent", "nodes-langchain.agent"),
        ("n8n-nodes-langchain.toolCode", "nodes-langchain.toolCode"),
        ("nodes-base.slack", "nodes-base.slack"),
        ("community-pkg.customNode", "community-pkg.customNode"),
    ],
)
def test_normalize_node_type(raw: str, expected: str) -> None:
    assert node_types.normalize_node_type(raw) == expected


def test_expand_and_describe_node_type() -> None:
    assert node_types.expand_node_type("nodes-base.webhook") == "n8n-nodes-base.webhook"
    assert (
        node_types.expand_node_type("nodes-langchain.agent") == "@n8n/n8n-nodes-langchain.agent"
    )

    info = node_types.describe_node_type("n8n-nodes-base.slack")
    assert info.normalized == "nodes-base.slack"
    assert info.package is node_types.NodePackage.BASE
    assert info.was_normalized is True
    assert info.short_name == "slack"
    assert node_types.detect_package("plain") is node_types.NodePackage.UNKNOWN
