"""
nodeconfig — semantic validators for AI tool sub-nodes.

File: src/nodeconfig/validation/tool_validators.py

Purpose
- Per-kind rule sets for the closed family of twelve tool sub-node kinds an AI
  agent can call, layered on top of structural validation.

What should be included in this file
- ``ToolKind`` enumeration and the immutable kind -> validator registry.
- Description, required-field, URL-format, numeric-bound, placeholder and
  credential checks.

Functional requirements
- Registry covers every ``ToolKind``; unknown node types yield no issues.
- Every issue carries the unit's id and name when known.
- Thresholds are configurable through ``ToolValidationSettings``.

Non-functional requirements
- No I/O; URL parsing is syntactic only.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final
from urllib.parse import urlsplit

from nodeconfig.constants import (
    MAX_ITERATIONS_WARNING_THRESHOLD,
    MAX_TOP_K_WARNING_THRESHOLD,
    MIN_TOOL_DESCRIPTION_LENGTH,
)
from nodeconfig.domain.models import Severity, Unit, ValidationIssue
from nodeconfig.domain.node_types import normalize_node_type

TOOL_NODE_PREFIX: Final[str] = "nodes-langchain."
VALID_HTTP_METHODS: Final[tuple[str, ...]] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
)
_BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT", "PATCH"})
# Single-brace tokens only; ``{{ ... }}`` is expression syntax.
_PLACEHOLDER: Final[re.Pattern[str]] = re.compile(r"(?<!\{)\{([^{}]+)\}(?!\})")
_LANGUAGE_CODE: Final[re.Pattern[str]] = re.compile(r"^[a-z]{2,3}$")


class ToolKind(StrEnum):
    HTTP_REQUEST = "toolHttpRequest"
    CODE = "toolCode"
    VECTOR_STORE = "toolVectorStore"
    WORKFLOW = "toolWorkflow"
    AGENT = "agentTool"
    MCP_CLIENT = "mcpClientTool"
    CALCULATOR = "toolCalculator"
    THINK = "toolThink"
    SERP_API = "toolSerpApi"
    WIKIPEDIA = "toolWikipedia"
    SEARXNG = "toolSearXng"
    WOLFRAM_ALPHA = "toolWolframAlpha"

    @property
    def node_type(self) -> str:
        return f"{TOOL_NODE_PREFIX}{self.value}"


@dataclass(frozen=True, slots=True)
class ToolValidationSettings:
    min_description_length: int = MIN_TOOL_DESCRIPTION_LENGTH
    max_iterations_warning_threshold: int = MAX_ITERATIONS_WARNING_THRESHOLD
    max_top_k_warning_threshold: int = MAX_TOP_K_WARNING_THRESHOLD


DEFAULT_TOOL_SETTINGS: Final[ToolValidationSettings] = ToolValidationSettings()


class _ToolIssues:
    """Issue sink bound to one unit; stamps identity on every finding."""

    __slots__ = ("_items", "label", "unit")

    def __init__(self, unit: Unit, label: str) -> None:
        self.unit = unit
        self.label = f'{label} "{unit.name}"'
        self._items: list[ValidationIssue] = []

    def add(self, severity: Severity, message: str, code: str) -> None:
        self._items.append(
            ValidationIssue(
                severity=severity,
                message=f"{self.label} {message}",
                unit_id=self.unit.id,
                unit_name=self.unit.name,
                code=code,
            )
        )

    def items(self) -> list[ValidationIssue]:
        return list(self._items)


ToolValidator = Callable[[Unit, ToolValidationSettings], list[ValidationIssue]]


def _require_description(
    issues: _ToolIssues, params: Mapping[str, object], hint: str
) -> None:
    if not params.get("toolDescription"):
        issues.add(
            Severity.ERROR,
            f"has no toolDescription. {hint}",
            "MISSING_TOOL_DESCRIPTION",
        )


def _is_positive_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value == value
        and value >= 1
    )


def validate_http_request_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "HTTP Request Tool")
    params = unit.parameters

    description = params.get("toolDescription")
    if not description:
        issues.add(
            Severity.ERROR,
            "has no toolDescription. Add a clear description to help the LLM know "
            "when to use this API.",
            "MISSING_TOOL_DESCRIPTION",
        )
    elif isinstance(description, str) and len(description.strip()) < settings.min_description_length:
        issues.add(
            Severity.WARNING,
            f"toolDescription is too short (minimum {settings.min_description_length} "
            "characters). Explain what API this calls and when to use it.",
            "SHORT_TOOL_DESCRIPTION",
        )

    url = params.get("url")
    if not url:
        issues.add(Severity.ERROR, "has no URL. Add the API endpoint URL.", "MISSING_URL")
    elif isinstance(url, str):
        _check_tool_url(issues, url)

    if params.get("url") or params.get("body") or params.get("headers"):
        _check_placeholders(issues, params)

    if params.get("authentication") == "predefinedCredentialType" and not unit.credentials:
        issues.add(
            Severity.ERROR,
            "requires credentials but none are configured.",
            "MISSING_CREDENTIALS",
        )

    method = params.get("method")
    if isinstance(method, str) and method and method.upper() not in VALID_HTTP_METHODS:
        issues.add(
            Severity.ERROR,
            f'has invalid HTTP method "{method}". Use one of: {", ".join(VALID_HTTP_METHODS)}.',
            "INVALID_HTTP_METHOD",
        )
    if (
        isinstance(method, str)
        and method.upper() in _BODY_METHODS
        and not params.get("body")
        and not params.get("jsonBody")
    ):
        issues.add(
            Severity.WARNING,
            f"uses {method} but has no body. Consider adding a body or using GET instead.",
            "MISSING_REQUEST_BODY",
        )

    return issues.items()


def _check_tool_url(issues: _ToolIssues, url: str) -> None:
    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None

    # Any explicit scheme is judged before the shape: file:, javascript: and data: have no host.
    if parts is not None and parts.scheme and parts.scheme.lower() not in ("http", "https"):
        issues.add(
            Severity.ERROR,
            f'has invalid URL protocol "{parts.scheme}:". Use http:// or https:// only.',
            "INVALID_URL_PROTOCOL",
        )
        return

    if (parts is None or not parts.scheme or not parts.netloc) and "{{" not in url:
        issues.add(
            Severity.WARNING,
            "has potentially invalid URL format. Ensure it's a valid URL or n8n expression.",
            "INVALID_URL_FORMAT",
        )


def _strings_in(value: object) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield str(key)
            yield from _strings_in(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _strings_in(item)


def _check_placeholders(issues: _ToolIssues, params: Mapping[str, object]) -> None:
    referenced: dict[str, None] = {}
    sources = (params.get("url"), params.get("body"), params.get("headers"))
    for source in sources:
        for text in _strings_in(source):
            for match in _PLACEHOLDER.finditer(text):
                referenced.setdefault(match.group(1), None)
    if not referenced:
        return

    raw_definitions = params.get("placeholderDefinitions")
    if not raw_definitions:
        issues.add(
            Severity.WARNING,
            "uses placeholders but has no placeholderDefinitions. Add definitions to "
            "describe the expected inputs.",
            "MISSING_PLACEHOLDER_DEFINITIONS",
        )
        return

    defined: list[str] = []
    values = raw_definitions.get("values") if isinstance(raw_definitions, Mapping) else None
    if isinstance(values, (list, tuple)):
        for entry in values:
            if isinstance(entry, Mapping) and isinstance(entry.get("name"), str):
                defined.append(entry["name"])

    for name in referenced:
        if name not in defined:
            issues.add(
                Severity.ERROR,
                f"Placeholder \"{name}\" in URL but it's not defined in placeholderDefinitions.",
                "UNDEFINED_PLACEHOLDER",
            )
    for name in defined:
        if name not in referenced:
            issues.add(
                Severity.WARNING,
                f"defines placeholder \"{name}\" but doesn't use it.",
                "UNUSED_PLACEHOLDER",
            )


def validate_code_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "Code Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to help the LLM understand the tool's purpose.")

    code = params.get("jsCode")
    if not code or (isinstance(code, str) and not code.strip()):
        issues.add(
            Severity.ERROR,
            "code is empty. Add the JavaScript code to execute.",
            "MISSING_CODE",
        )
    if not params.get("inputSchema") and not params.get("specifyInputSchema"):
        issues.add(
            Severity.WARNING,
            "has no input schema. Consider adding one to validate LLM inputs.",
            "MISSING_INPUT_SCHEMA",
        )
    return issues.items()


def validate_vector_store_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "Vector Store Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to explain what data it searches.")

    if "topK" in params:
        top_k = params["topK"]
        threshold = settings.max_top_k_warning_threshold
        if not _is_positive_number(top_k):
            issues.add(
                Severity.ERROR,
                "has invalid topK value. Must be a positive number.",
                "INVALID_TOPK",
            )
        elif top_k > threshold:  # type: ignore[operator]
            issues.add(
                Severity.WARNING,
                f"has topK={top_k}. Large values (>{threshold}) may overwhelm the LLM "
                "context. Consider reducing to 10 or less.",
                "HIGH_TOPK",
            )
    return issues.items()


def validate_workflow_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "Workflow Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to help the LLM know when to use this tool.")
    if not params.get("workflowId"):
        issues.add(
            Severity.ERROR,
            "has no workflowId. Select a workflow to execute.",
            "MISSING_WORKFLOW_ID",
        )
    return issues.items()


def validate_agent_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "AI Agent Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to help the LLM know when to use this tool.")

    if "maxIterations" in params:
        max_iterations = params["maxIterations"]
        threshold = settings.max_iterations_warning_threshold
        if not _is_positive_number(max_iterations):
            issues.add(
                Severity.ERROR,
                "has invalid maxIterations. Must be a positive number.",
                "INVALID_MAX_ITERATIONS",
            )
        elif max_iterations > threshold:  # type: ignore[operator]
            issues.add(
                Severity.WARNING,
                f"has maxIterations={max_iterations}. Large values (>{threshold}) may "
                "lead to long execution times.",
                "HIGH_MAX_ITERATIONS",
            )
    return issues.items()


def validate_mcp_client_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "MCP Client Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to help the LLM know when to use this tool.")
    if not params.get("serverUrl"):
        issues.add(
            Severity.ERROR,
            "has no serverUrl. Configure the MCP server URL.",
            "MISSING_SERVER_URL",
        )
    return issues.items()


def validate_self_describing_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    """Calculator and Think tools ship a built-in description; nothing to check."""

    return []


def validate_serp_api_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "SerpApi Tool")
    _require_description(issues, unit.parameters, "Add one to explain when to use Google search.")
    if not unit.credentials.get("serpApiApi"):
        issues.add(
            Severity.WARNING,
            "requires SerpApi credentials. Configure your API key.",
            "MISSING_TOOL_CREDENTIALS",
        )
    return issues.items()


def validate_wikipedia_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "Wikipedia Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to explain when to use Wikipedia.")

    language = params.get("language")
    if isinstance(language, str) and language and _LANGUAGE_CODE.match(language) is None:
        issues.add(
            Severity.WARNING,
            f'has potentially invalid language code "{language}". Use ISO 639 codes '
            '(e.g., "en", "es", "fr").',
            "INVALID_LANGUAGE_CODE",
        )
    return issues.items()


def validate_searxng_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "SearXNG Tool")
    params = unit.parameters
    _require_description(issues, params, "Add one to explain when to use SearXNG.")
    if not params.get("baseUrl"):
        issues.add(
            Severity.ERROR,
            "has no baseUrl. Configure your SearXNG instance URL.",
            "MISSING_BASE_URL",
        )
    return issues.items()


def validate_wolfram_alpha_tool(
    unit: Unit, settings: ToolValidationSettings = DEFAULT_TOOL_SETTINGS
) -> list[ValidationIssue]:
    issues = _ToolIssues(unit, "WolframAlpha Tool")
    params = unit.parameters
    credentials = unit.credentials
    if not credentials.get("wolframAlpha") and not credentials.get("wolframAlphaApi"):
        issues.add(
            Severity.ERROR,
            "requires Wolfram|Alpha API credentials. Configure your App ID.",
            "MISSING_CREDENTIALS",
        )
    if not params.get("description") and not params.get("toolDescription"):
        issues.add(
            Severity.INFO,
            "has no custom description. Add one to explain when to use Wolfram|Alpha "
            "for computational queries.",
            "MISSING_CUSTOM_DESCRIPTION",
        )
    return issues.items()


_VALIDATORS_BY_KIND: Final[Mapping[ToolKind, ToolValidator]] = MappingProxyType(
    {
        ToolKind.HTTP_REQUEST: validate_http_request_tool,
        ToolKind.CODE: validate_code_tool,
        ToolKind.VECTOR_STORE: validate_vector_store_tool,
        ToolKind.WORKFLOW: validate_workflow_tool,
        ToolKind.AGENT: validate_agent_tool,
        ToolKind.MCP_CLIENT: validate_mcp_client_tool,
        ToolKind.CALCULATOR: validate_self_describing_tool,
        ToolKind.THINK: validate_self_describing_tool,
        ToolKind.SERP_API: validate_serp_api_tool,
        ToolKind.WIKIPEDIA: validate_wikipedia_tool,
        ToolKind.SEARXNG: validate_searxng_tool,
        ToolKind.WOLFRAM_ALPHA: validate_wolfram_alpha_tool,
    }
)

if set(_VALIDATORS_BY_KIND) != set(ToolKind):
    raise RuntimeError("tool validator registry does not cover every ToolKind")

TOOL_VALIDATORS: Final[Mapping[str, ToolValidator]] = MappingProxyType(
    {kind.node_type: validator for kind, validator in _VALIDATORS_BY_KIND.items()}
)


def tool_kind_for(node_type: str) -> ToolKind | None:
    normalized = normalize_node_type(node_type)
    if not normalized.startswith(TOOL_NODE_PREFIX):
        return None
    try:
        return ToolKind(normalized[len(TOOL_NODE_PREFIX) :])
    except ValueError:
        return None


def is_tool_node_type(node_type: str) -> bool:
    return tool_kind_for(node_type) is not None


def validate_tool_unit(
    unit: Unit,
    node_type: str | None = None,
    settings: ToolValidationSettings | None = None,
) -> list[ValidationIssue]:
    """Run the kind-specific validator for ``unit``; unknown kinds yield ``[]``."""

    kind = tool_kind_for(node_type if node_type is not None else unit.type)
    if kind is None:
        return []
    return _VALIDATORS_BY_KIND[kind](unit, settings or DEFAULT_TOOL_SETTINGS)


__all__ = [
    "DEFAULT_TOOL_SETTINGS",
    "TOOL_VALIDATORS",
    "VALID_HTTP_METHODS",
    "ToolKind",
    "ToolValidationSettings",
    "is_tool_node_type",
    "tool_kind_for",
    "validate_agent_tool",
    "validate_code_tool",
    "validate_http_request_tool",
    "validate_mcp_client_tool",
    "validate_searxng_tool",
    "validate_self_describing_tool",
    "validate_serp_api_tool",
    "validate_tool_unit",
    "validate_vector_store_tool",
    "validate_wikipedia_tool",
    "validate_wolfram_alpha_tool",
    "validate_workflow_tool",
]
