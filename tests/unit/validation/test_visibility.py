"""
nodeconfig — unit tests for property visibility and relevance

File: tests/unit/validation/test_visibility.py

Purpose
- Lock down show/hide semantics, the visibility requirement diagnostic,
  operation relevance and defaults application.

What this test file should cover
- No display rules: always visible.
- ``show``: AND across fields, OR within a field; unset never matches.
- ``hide`` only denies visibility.
- Defaults application is idempotent and never overwrites explicit values.
"""

from __future__ import annotations

import pytest

from nodeconfig.domain.models import DisplayOptions, OperationContext, PropertyDescriptor
from nodeconfig.validation.visibility import (
    apply_defaults,
    extract_operation_context,
    get_visibility_requirement,
    is_property_relevant,
    is_property_visible,
    partition_by_visibility,
    values_match,
)

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ModuleNotFoundError:
    _HYPOTHESIS_AVAILABLE = False
else:
    _HYPOTHESIS_AVAILABLE = True


def _descriptor(raw: dict[str, object]) -> PropertyDescriptor:
    parsed = PropertyDescriptor.from_mapping(raw)
    assert parsed is not None
    return parsed


def test_show_requires_every_field() -> None:
    descriptor = _descriptor(
        {
            "name": "channel",
            "displayOptions": {"show": {"resource": ["message"], "operation": ["send", "update"]}},
        }
    )

    assert is_property_visible(descriptor, {"resource": "message", "operation": "update"})
    assert not is_property_visible(descriptor, {"resource": "message", "operation": "delete"})
    assert not is_property_visible(descriptor, {"resource": "message"})


def test_show_membership_for_numeric_values() -> None:
    descriptor = _descriptor({"name": "p", "displayOptions": {"show": {"a": [1, 2]}}})

    assert is_property_visible(descriptor, {"a": 1})
    assert is_property_visible(descriptor, {"a": 2})
    assert not is_property_visible(descriptor, {"a": 3})
    assert not is_property_visible(descriptor, {})


def test_hide_only_denies_visibility() -> None:
    descriptor = _descriptor({"name": "p", "displayOptions": {"hide": {"a": [1]}}})

    assert not is_property_visible(descriptor, {"a": 1})
    assert is_property_visible(descriptor, {"a": 2})
    assert is_property_visible(descriptor, {})


def test_hide_wins_over_matching_show() -> None:
    descriptor = _descriptor(
        {"name": "p", "displayOptions": {"show": {"a": [1]}, "hide": {"b": [True]}}}
    )
    assert is_property_visible(descriptor, {"a": 1, "b": False})
    assert not is_property_visible(descriptor, {"a": 1, "b": True})


def test_unset_field_does_not_match_explicit_none() -> None:
    descriptor = _descriptor({"name": "p", "displayOptions": {"show": {"a": [None]}}})

    assert is_property_visible(descriptor, {"a": None})
    assert not is_property_visible(descriptor, {})


@pytest.mark.parametrize(
    ("actual", "expected", "matches"),
    [
        (True, True, True),
        (1, True, False),
        (True, 1, False),
        (0, False, False),
        ("1", 1, False),
        (1, 1.0, True),
        ("json", "json", True),
    ],
)
def test_values_match_is_strict(actual: object, expected: object, matches: bool) -> None:
    assert values_match(actual, expected) is matches


def test_visibility_requirement_for_hidden_url() -> None:
    descriptor = _descriptor(
        {"name": "url", "displayOptions": {"show": {"authentication": ["apiKey"]}}}
    )
    config = {"authentication": "oauth2"}

    assert is_property_visible(descriptor, config) is False
    assert get_visibility_requirement(descriptor, config) == 'Requires: authentication="apiKey"'


def test_visibility_requirement_lists_only_unmet_fields() -> None:
    descriptor = _descriptor(
        {
            "name": "body",
            "displayOptions": {"show": {"sendBody": [True], "method": ["POST", "PUT"]}},
        }
    )

    assert (
        get_visibility_requirement(descriptor, {"sendBody": True})
        == 'Requires: method="POST" or "PUT"'
    )
    assert (
        get_visibility_requirement(descriptor, {})
        == 'Requires: sendBody="true", method="POST" or "PUT"'
    )
    assert get_visibility_requirement(descriptor, {"sendBody": True, "method": "PUT"}) is None
    assert get_visibility_requirement(None, {}) is None


def test_relevance_filters_by_selected_operation() -> None:
    send_only = _descriptor(
        {"name": "text", "displayOptions": {"show": {"operation": ["send"]}}}
    )
    unconditioned = _descriptor({"name": "resource"})

    send = OperationContext(operation="send")
    assert is_property_relevant(send_only, {"operation": "send"}, send)
    assert not is_property_relevant(send_only, {"operation": "update"}, OperationContext(operation="update"))
    assert is_property_relevant(unconditioned, {}, send)
    assert is_property_relevant(unconditioned, {}, OperationContext())


def test_extract_operation_context_copies_values() -> None:
    context = extract_operation_context(
        {"resource": "message", "operation": "send", "mode": "raw", "other": 1}
    )
    assert context == OperationContext(resource="message", operation="send", mode="raw")
    assert extract_operation_context({}).is_empty


def test_apply_defaults_preserves_explicit_values_and_input() -> None:
    descriptors = [
        {"name": "method", "default": "GET"},
        {"name": "timeout", "default": 1000},
        {"name": "note", "default": None},
        {"name": "free"},
    ]
    config = {"timeout": None}

    result = apply_defaults(descriptors, config)

    assert result == {"timeout": None, "method": "GET", "note": None}
    assert config == {"timeout": None}


def test_apply_defaults_for_directly_built_descriptors() -> None:
    operation = PropertyDescriptor(name="operation", type="options", default="get")
    note = PropertyDescriptor(name="note", default=None)
    free = PropertyDescriptor(name="free")
    record_id = PropertyDescriptor(
        name="recordId", display_options=DisplayOptions(show={"operation": ("get",)})
    )

    assert operation.has_default and note.has_default
    assert not free.has_default

    effective = apply_defaults([operation, note, free, record_id], {})

    assert effective == {"operation": "get", "note": None}
    assert is_property_visible(record_id, effective)


def test_partition_by_visibility_is_disjoint_and_ordered() -> None:
    descriptors = [
        _descriptor({"name": "a"}),
        _descriptor({"name": "b", "displayOptions": {"show": {"a": ["x"]}}}),
        _descriptor({"name": "c", "displayOptions": {"hide": {"a": ["x"]}}}),
    ]
    visible, hidden = partition_by_visibility(descriptors, {"a": "x"})
    assert visible == ("a", "b")
    assert hidden == ("c",)


if _HYPOTHESIS_AVAILABLE:
    _scalars = st.one_of(st.none(), st.booleans(), st.integers(-5, 5), st.sampled_from(["a", "b"]))
    _configs = st.dictionaries(st.sampled_from(["a", "b", "c", "d"]), _scalars, max_size=4)
    _schemas = st.lists(
        st.fixed_dictionaries(
            {"name": st.sampled_from(["a", "b", "c", "d", "e"])},
            optional={"default": _scalars},
        ),
        max_size=6,
    )

    @given(config=_configs)
    def test_property_no_display_rules_always_visible(config: dict[str, object]) -> None:
        assert is_property_visible(_descriptor({"name": "any"}), config)

    @given(value=_scalars)
    def test_property_show_membership(value: object) -> None:
        descriptor = _descriptor({"name": "p", "displayOptions": {"show": {"a": [1, 2]}}})
        expected = (
            not isinstance(value, bool) and isinstance(value, int) and value in (1, 2)
        )
        assert is_property_visible(descriptor, {"a": value}) is expected

    @given(schema=_schemas, config=_configs)
    def test_property_apply_defaults_is_idempotent(
        schema: list[dict[str, object]], config: dict[str, object]
    ) -> None:
        once = apply_defaults(schema, config)
        assert apply_defaults(schema, once) == once
        for key, value in config.items():
            assert once[key] == value

else:

    def test_property_no_display_rules_always_visible() -> None:
        pytest.skip("hypothesis is not installed")

    def test_property_show_membership() -> None:
        pytest.skip("hypothesis is not installed")

    def test_property_apply_defaults_is_idempotent() -> None:
        pytest.skip("hypothesis is not installed")
