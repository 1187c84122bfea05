"""
nodeconfig — unit tests for AI tool sub-node validators

File: tests/unit/validation/test_tool_validators.py

Purpose
- Exercise each of the twelve tool kinds, the registry's exhaustiveness and the
  configurable thresholds.
"""

from __future__ import annotations

import pytest

from nodeconfig.domain.models import Severity, Unit
from nodeconfig.validation.tool_validators import (
    TOOL_VALIDATORS,
    ToolKind,
    ToolValidationSettings,
    is_tool_node_type,
    tool_kind_for,
    validate_tool_unit,
)

_DESCRIPTION = "Fetches the current weather for a city from the public API"


def _unit(kind: ToolKind, parameters: dict[str, object], **extra: object) -> Unit:
    return Unit(
        name="My Tool",
        type=kind.node_type,
        parameters=parameters,
        credentials=extra.get("credentials", {}),  # type: ignore[arg-type]
        id="node-1",
    )


def _codes(issues: list[object], severity: Severity | None = None) -> list[str]:
    return [
        issue.code  # type: ignore[attr-defined]
        for issue in issues
        if severity is None or issue.severity is severity  # type: ignore[attr-defined]
    ]


def test_registry_covers_every_kind() -> None:
    assert len(TOOL_VALIDATORS) == len(ToolKind) == 12
    for kind in ToolKind:
        assert kind.node_type in TOOL_VALIDATORS
        assert tool_kind_for(kind.node_type) is kind


def test_kind_lookup_accepts_full_form_and_rejects_unknown() -> None:
    assert tool_kind_for("@n8n/n8n-nodes-langchain.toolCode") is ToolKind.CODE
    assert tool_kind_for("nodes-langchain.agent") is None
    assert tool_kind_for("nodes-base.httpRequest") is None
    assert not is_tool_node_type("nodes-langchain.unknownTool")
    assert validate_tool_unit(Unit(name="x", type="nodes-base.set")) == []


def test_http_tool_ftp_url_without_description_gives_two_errors() -> None:
    issues = validate_tool_unit(_unit(ToolKind.HTTP_REQUEST, {"url": "ftp://example.com"}))

    errors = [issue for issue in issues if issue.is_error]
    assert len(errors) == 2
    assert _codes(errors) == ["MISSING_TOOL_DESCRIPTION", "INVALID_URL_PROTOCOL"]
    assert all(issue.unit_id == "node-1" and issue.unit_name == "My Tool" for issue in issues)
    assert errors[0].message.startswith('HTTP Request Tool "My Tool"')


@pytest.mark.parametrize(
    "url",
    ["file:///etc/passwd", "javascript:alert(1)", "mailto:a@b.c", "data:text/plain,hi"],
)
def test_http_tool_hostless_schemes_are_protocol_errors(url: str) -> None:
    issues = validate_tool_unit(
        _unit(ToolKind.HTTP_REQUEST, {"toolDescription": _DESCRIPTION, "url": url})
    )

    assert [(issue.severity, issue.code) for issue in issues] == [
        (Severity.ERROR, "INVALID_URL_PROTOCOL")
    ]


def test_http_tool_url_format_and_expressions() -> None:
    relative = validate_tool_unit(
        _unit(ToolKind.HTTP_REQUEST, {"toolDescription": _DESCRIPTION, "url": "example.com/api"})
    )
    assert _codes(relative) == ["INVALID_URL_FORMAT"]

    expression = validate_tool_unit(
        _unit(ToolKind.HTTP_REQUEST, {"toolDescription": _DESCRIPTION, "url": "={{ $json.url }}"})
    )
    assert expression == []


def test_http_tool_placeholders() -> None:
    params = {
        "toolDescription": _DESCRIPTION,
        "url": "https://api.example.com/{city}/{units}",
        "placeholderDefinitions": {"values": [{"name": "city"}, {"name": "lang"}]},
    }
    issues = validate_tool_unit(_unit(ToolKind.HTTP_REQUEST, params))

    assert _codes(issues, Severity.ERROR) == ["UNDEFINED_PLACEHOLDER"]
    assert '"units"' in issues[0].message
    assert _codes(issues, Severity.WARNING) == ["UNUSED_PLACEHOLDER"]

    undefined = validate_tool_unit(
        _unit(
            ToolKind.HTTP_REQUEST,
            {"toolDescription": _DESCRIPTION, "url": "https://x.io", "body": {"q": "{query}"}},
        )
    )
    assert _codes(undefined) == ["MISSING_PLACEHOLDER_DEFINITIONS"]


def test_http_tool_method_credentials_and_short_description() -> None:
    issues = validate_tool_unit(
        _unit(
            ToolKind.HTTP_REQUEST,
            {
                "toolDescription": "weather",
                "url": "https://api.example.com",
                "authentication": "predefinedCredentialType",
                "method": "post",
            },
        )
    )
    assert _codes(issues) == ["SHORT_TOOL_DESCRIPTION", "MISSING_CREDENTIALS", "MISSING_REQUEST_BODY"]

    invalid = validate_tool_unit(
        _unit(
            ToolKind.HTTP_REQUEST,
            {"toolDescription": _DESCRIPTION, "url": "https://x.io", "method": "FETCH"},
        )
    )
    assert _codes(invalid) == ["INVALID_HTTP_METHOD"]


def test_agent_tool_high_max_iterations_is_one_warning() -> None:
    issues = validate_tool_unit(
        _unit(ToolKind.AGENT, {"toolDescription": _DESCRIPTION, "maxIterations": 200})
    )
    assert [issue.severity for issue in issues] == [Severity.WARNING]
    assert issues[0].code == "HIGH_MAX_ITERATIONS"


@pytest.mark.parametrize("value", [0, -3, "10", True, float("nan")])
def test_agent_tool_invalid_max_iterations(value: object) -> None:
    issues = validate_tool_unit(
        _unit(ToolKind.AGENT, {"toolDescription": _DESCRIPTION, "maxIterations": value})
    )
    assert _codes(issues) == ["INVALID_MAX_ITERATIONS"]


def test_thresholds_are_configurable() -> None:
    settings = ToolValidationSettings(max_iterations_warning_threshold=500, max_top_k_warning_threshold=2)
    agent = validate_tool_unit(
        _unit(ToolKind.AGENT, {"toolDescription": _DESCRIPTION, "maxIterations": 200}),
        settings=settings,
    )
    assert agent == []

    store = validate_tool_unit(
        _unit(ToolKind.VECTOR_STORE, {"toolDescription": _DESCRIPTION, "topK": 5}),
        settings=settings,
    )
    assert _codes(store) == ["HIGH_TOPK"]


def test_vector_store_top_k() -> None:
    assert _codes(
        validate_tool_unit(_unit(ToolKind.VECTOR_STORE, {"toolDescription": _DESCRIPTION, "topK": 0}))
    ) == ["INVALID_TOPK"]
    assert validate_tool_unit(
        _unit(ToolKind.VECTOR_STORE, {"toolDescription": _DESCRIPTION, "topK": 4})
    ) == []


@pytest.mark.parametrize(
    ("kind", "parameters", "expected"),
    [
        (ToolKind.CODE, {}, ["MISSING_TOOL_DESCRIPTION", "MISSING_CODE", "MISSING_INPUT_SCHEMA"]),
        (
            ToolKind.CODE,
            {"toolDescription": _DESCRIPTION, "jsCode": "return 1", "specifyInputSchema": True},
            [],
        ),
        (ToolKind.WORKFLOW, {"toolDescription": _DESCRIPTION}, ["MISSING_WORKFLOW_ID"]),
        (ToolKind.MCP_CLIENT, {"toolDescription": _DESCRIPTION}, ["MISSING_SERVER_URL"]),
        (ToolKind.SEARXNG, {"toolDescription": _DESCRIPTION}, ["MISSING_BASE_URL"]),
        (
            ToolKind.WIKIPEDIA,
            {"toolDescription": _DESCRIPTION, "language": "english"},
            ["INVALID_LANGUAGE_CODE"],
        ),
        (ToolKind.WIKIPEDIA, {"toolDescription": _DESCRIPTION, "language": "en"}, []),
        (ToolKind.CALCULATOR, {}, []),
        (ToolKind.THINK, {}, []),
    ],
)
def test_kind_specific_rules(
    kind: ToolKind, parameters: dict[str, object], expected: list[str]
) -> None:
    assert _codes(validate_tool_unit(_unit(kind, parameters))) == expected


def test_credentialed_search_tools() -> None:
    serp = validate_tool_unit(_unit(ToolKind.SERP_API, {"toolDescription": _DESCRIPTION}))
    assert [(i.severity, i.code) for i in serp] == [(Severity.WARNING, "MISSING_TOOL_CREDENTIALS")]

    wolfram = validate_tool_unit(_unit(ToolKind.WOLFRAM_ALPHA, {}))
    assert [(i.severity, i.code) for i in wolfram] == [
        (Severity.ERROR, "MISSING_CREDENTIALS"),
        (Severity.INFO, "MISSING_CUSTOM_DESCRIPTION"),
    ]

    configured = validate_tool_unit(
        _unit(
            ToolKind.WOLFRAM_ALPHA,
            {"description": "math"},
            credentials={"wolframAlphaApi": {"id": "1"}},
        )
    )
    assert configured == []
