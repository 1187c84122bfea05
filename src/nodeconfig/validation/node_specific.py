"""
nodeconfig — operation-aware checks for commonly used base nodes.

File: src/nodeconfig/validation/node_specific.py

Purpose
- Layer node-kind knowledge (HTTP Request, Webhook, Code, SQL databases, Slack,
  OpenAI, Google Sheets, Set, MongoDB, AI Agent) on top of structural validation.

Functional requirements
- Each validator reads the configuration only; it never mutates it.
- Findings carry a category so profile filtering can keep or drop them.
- Suggested configuration patches are collected in ``autofix``; callers decide
  whether to apply them.
- Unknown node types produce an empty result.

Non-functional requirements
- Registry is an immutable mapping built at import.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from nodeconfig.domain.models import ConfigSnapshot, IssueCategory, Severity, ValidationIssue
from nodeconfig.domain.node_types import normalize_node_type
from nodeconfig.validation.expressions import should_skip_literal_validation

SLACK_MESSAGE_LIMIT: Final[int] = 40_000
SLACK_CHANNEL_NAME_LIMIT: Final[int] = 80
AGENT_SYSTEM_MESSAGE_MIN_LENGTH: Final[int] = 20
AGENT_MAX_ITERATIONS_THRESHOLD: Final[int] = 50
CODE_ERROR_HANDLING_LENGTH: Final[int] = 100

_BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT", "PATCH"})
_SQL_OPERATIONS: Final[frozenset[str]] = frozenset({"execute", "select", "insert", "update", "delete"})
_SQL_WRITE_OPERATIONS: Final[frozenset[str]] = frozenset({"insert", "update", "delete"})
_UNAVAILABLE_PYTHON_MODULES: Final[tuple[str, ...]] = ("requests", "pandas", "numpy", "pip")
_DEPRECATED_OPENAI_MODELS: Final[frozenset[str]] = frozenset(
    {"text-davinci-003", "text-davinci-002"}
)
_RETURN_STATEMENT: Final[re.Pattern[str]] = re.compile(r"return\s+")
_LEADING_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"^(\s+)")
_QUOTED_SHEET: Final[re.Pattern[str]] = re.compile(r"^'[^']+'")


@dataclass(frozen=True, slots=True)
class NodeSpecificResult:
    issues: tuple[ValidationIssue, ...] = ()
    suggestions: tuple[str, ...] = ()
    autofix: dict[str, object] = field(default_factory=dict)


class _Findings:
    """Accumulates issues, suggestions and autofix patches for one node."""

    __slots__ = ("autofix", "config", "issues", "suggestions")

    def __init__(self, config: ConfigSnapshot) -> None:
        self.config = config
        self.issues: list[ValidationIssue] = []
        self.suggestions: list[str] = []
        self.autofix: dict[str, object] = {}

    def get(self, key: str) -> object:
        return self.config.get(key)

    def text(self, key: str) -> str | None:
        value = self.config.get(key)
        return value if isinstance(value, str) else None

    def error(
        self,
        category: IssueCategory,
        message: str,
        *,
        property_name: str | None = None,
        fix: str | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                message=message,
                category=category,
                property_name=property_name,
                fix=fix,
            )
        )

    def warning(
        self,
        category: IssueCategory,
        message: str,
        *,
        property_name: str | None = None,
        fix: str | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=Severity.WARNING,
                message=message,
                category=category,
                property_name=property_name,
                fix=fix,
            )
        )

    def suggest(self, text: str) -> None:
        self.suggestions.append(text)

    def patch(self, **values: object) -> None:
        self.autofix.update(values)

    @property
    def has_error_handling(self) -> bool:
        return bool(
            self.get("onError") or self.get("retryOnFail") or self.get("continueOnFail")
        )

    def result(self) -> NodeSpecificResult:
        return NodeSpecificResult(
            issues=tuple(self.issues),
            suggestions=tuple(self.suggestions),
            autofix=dict(self.autofix),
        )


NodeValidator = Callable[[_Findings], None]


# ---------------------------------------------------------------------------
# Slack
# ---------------------------------------------------------------------------


def _validate_slack(found: _Findings) -> None:
    resource = found.get("resource")
    operation = found.get("operation")

    if resource == "message":
        if operation == "send":
            _slack_send_message(found)
        elif operation in ("update", "delete"):
            _slack_change_message(found, operation)
    elif resource == "channel" and operation == "create":
        _slack_create_channel(found)
    elif resource == "user" and operation == "get" and not found.get("user"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "User identifier required - use email, user ID, or username",
            property_name="user",
            fix='Set user to an email like "john@example.com" or user ID like "U1234567890"',
        )

    if not found.has_error_handling:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "Slack API can have rate limits and transient failures",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" with retryOnFail for resilience',
        )
        found.patch(
            onError="continueRegularOutput", retryOnFail=True, maxTries=2, waitBetweenTries=3000
        )
    _warn_deprecated_continue_on_fail(found)


def _slack_send_message(found: _Findings) -> None:
    if not found.get("channel") and not found.get("channelId"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Channel is required to send a message",
            property_name="channel",
            fix='Set channel to a channel name (e.g., "#general") or ID (e.g., "C1234567890")',
        )
    if not found.get("text") and not found.get("blocks") and not found.get("attachments"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Message content is required - provide text, blocks, or attachments",
            property_name="text",
            fix="Add text field with your message content",
        )

    text = found.text("text")
    if text and len(text) > SLACK_MESSAGE_LIMIT:
        found.warning(
            IssueCategory.INEFFICIENT,
            "Message text exceeds Slack's 40,000 character limit",
            property_name="text",
            fix="Split into multiple messages or use a file upload",
        )
    if found.get("replyToThread") and not found.get("threadTs"):
        found.warning(
            IssueCategory.MISSING_COMMON,
            "Thread timestamp required when replying to thread",
            property_name="threadTs",
            fix="Set threadTs to the timestamp of the thread parent message",
        )
    if text and "@" in text and not found.get("linkNames"):
        found.suggest("Set linkNames=true to convert @mentions to user links")
        found.patch(linkNames=True)


def _slack_change_message(found: _Findings, operation: str) -> None:
    if not found.get("ts"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            f"Message timestamp (ts) is required to {operation} a message",
            property_name="ts",
            fix=f"Provide the timestamp of the message to {operation}",
        )
    if not found.get("channel") and not found.get("channelId"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            f"Channel is required to {operation} a message",
            property_name="channel",
            fix="Provide the channel where the message exists",
        )
    if operation == "delete":
        found.warning(
            IssueCategory.SECURITY,
            "Message deletion is permanent and cannot be undone",
            fix="Consider archiving or updating the message instead",
        )


def _slack_create_channel(found: _Findings) -> None:
    name = found.text("name")
    if not name:
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Channel name is required",
            property_name="name",
            fix="Provide a channel name (lowercase, no spaces, 1-80 characters)",
        )
        return
    if " " in name:
        found.error(
            IssueCategory.INVALID_VALUE,
            "Channel names cannot contain spaces",
            property_name="name",
            fix="Use hyphens or underscores instead of spaces",
        )
    if name != name.lower():
        found.error(
            IssueCategory.INVALID_VALUE,
            "Channel names must be lowercase",
            property_name="name",
            fix="Convert the channel name to lowercase",
        )
    if len(name) > SLACK_CHANNEL_NAME_LIMIT:
        found.error(
            IssueCategory.INVALID_VALUE,
            "Channel name exceeds 80 character limit",
            property_name="name",
            fix="Shorten the channel name",
        )


def _warn_deprecated_continue_on_fail(found: _Findings) -> None:
    if "continueOnFail" in found.config:
        found.warning(
            IssueCategory.DEPRECATED,
            "continueOnFail is deprecated. Use onError instead",
            property_name="continueOnFail",
            fix='Replace with onError: "continueRegularOutput"',
        )


# ---------------------------------------------------------------------------
# HTTP Request and Webhook
# ---------------------------------------------------------------------------


def _validate_http_request(found: _Findings) -> None:
    raw_method = found.get("method")
    method = raw_method.upper() if isinstance(raw_method, str) and raw_method else "GET"
    url = found.text("url")
    send_body = found.get("sendBody")

    if not found.get("url"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "URL is required for HTTP requests",
            property_name="url",
            fix="Provide the full URL including protocol (https://...)",
        )
    elif url is not None and not should_skip_literal_validation(url):
        if not url.startswith(("http://", "https://")):
            found.error(
                IssueCategory.INVALID_VALUE,
                "URL must start with http:// or https://",
                property_name="url",
                fix="Add https:// to the beginning of your URL",
            )

    if method in _BODY_METHODS and not send_body:
        found.warning(
            IssueCategory.MISSING_COMMON,
            f"{method} requests typically include a body",
            property_name="sendBody",
            fix="Set sendBody: true and configure the body content",
        )
        found.patch(sendBody=True, contentType="json")

    if url and "api" in url and not found.get("authentication"):
        found.warning(
            IssueCategory.SECURITY,
            "API endpoints typically require authentication",
            property_name="authentication",
            fix="Configure authentication method (Bearer token, API key, etc.)",
        )

    json_body = found.text("jsonBody")
    if send_body and found.get("contentType") == "json" and json_body:
        if not should_skip_literal_validation(json_body):
            try:
                json.loads(json_body)
            except json.JSONDecodeError as exc:
                found.error(
                    IssueCategory.INVALID_VALUE,
                    f"jsonBody contains invalid JSON: {exc.msg}",
                    property_name="jsonBody",
                    fix="Fix JSON syntax error and ensure valid JSON format",
                )

    if not found.has_error_handling:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "HTTP requests can fail due to network issues or server errors",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" and retryOnFail: true for resilience',
        )
        found.patch(
            onError="continueRegularOutput", retryOnFail=True, maxTries=3, waitBetweenTries=1000
        )

    if not found.get("timeout"):
        found.suggest("Consider setting a timeout to prevent hanging requests")


def _validate_webhook(found: _Findings) -> None:
    path = found.text("path")
    if not found.get("path"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Webhook path is required",
            property_name="path",
            fix='Provide a unique path like "my-webhook" or "github-events"',
        )
    elif path is not None and path.startswith("/"):
        found.warning(
            IssueCategory.INVALID_VALUE,
            "Webhook path should not start with /",
            property_name="path",
            fix='Use "webhook-name" instead of "/webhook-name"',
        )

    if not found.get("onError") and not found.get("continueOnFail"):
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "Webhooks should always send a response, even on error",
            property_name="onError",
            fix='Set onError: "continueRegularOutput" to ensure webhook responses',
        )
        found.patch(onError="continueRegularOutput")

    found.suggest("Consider adding webhook validation (HMAC signature verification)")
    found.suggest("Implement rate limiting for public webhooks")


# ---------------------------------------------------------------------------
# Code
# ---------------------------------------------------------------------------


def _validate_code(found: _Findings) -> None:
    language = found.text("language") or "javaScript"
    code_field = "pythonCode" if language == "python" else "jsCode"
    code = found.text(code_field)

    if code is None or not code.strip():
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Code cannot be empty",
            property_name=code_field,
            fix='Add your code logic. Start with: return [{json: {result: "success"}}]',
        )
        return

    if _RETURN_STATEMENT.search(code) is None:
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Code must return data for the next node",
            property_name=code_field,
            fix=(
                'Add: return [{"json": {"result": "success"}}]'
                if language == "python"
                else 'Add: return [{json: {result: "success"}}]'
            ),
        )

    if "eval(" in code or "exec(" in code:
        found.warning(
            IssueCategory.SECURITY,
            "Code contains eval/exec which can be a security risk",
            fix="Avoid using eval/exec with untrusted input",
        )

    if language == "javaScript":
        _check_javascript(found, code)
    elif language == "python":
        _check_python(found, code)

    if not found.get("onError") and len(code) > CODE_ERROR_HANDLING_LENGTH:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "Code nodes can throw errors - consider error handling",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" to handle errors gracefully',
        )
        found.patch(onError="continueRegularOutput")


def _check_javascript(found: _Findings, code: str) -> None:
    if "items" not in code and "$input" not in code and "$json" not in code:
        found.warning(
            IssueCategory.MISSING_COMMON,
            "Code doesn't reference input data",
            fix="Access input with: items, $input.all(), or $json (in single-item mode)",
        )
    if "$json" in code and "mode" not in code:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            '$json only works in "Run Once for Each Item" mode',
            fix="For all items mode, use: items[0].json or loop through items",
        )
    if "$helpers.getWorkflowStaticData" in code:
        found.error(
            IssueCategory.INVALID_VALUE,
            '$helpers.getWorkflowStaticData() will cause "$helpers is not defined" error',
            property_name="jsCode",
            fix='Use $getWorkflowStaticData("global") or $getWorkflowStaticData("node") directly',
        )


def _check_python(found: _Findings, code: str) -> None:
    for module in _UNAVAILABLE_PYTHON_MODULES:
        if f"import {module}" in code or f"from {module}" in code:
            found.error(
                IssueCategory.INVALID_VALUE,
                f"Module '{module}' is not available in Code nodes",
                property_name="pythonCode",
                fix="Use JavaScript Code node with $helpers.httpRequest for HTTP requests",
            )

    indent_kinds: set[str] = set()
    for line in code.split("\n"):
        match = _LEADING_WHITESPACE.match(line)
        if match is None:
            continue
        if "\t" in match.group(1):
            indent_kinds.add("tabs")
        if " " in match.group(1):
            indent_kinds.add("spaces")
    if len(indent_kinds) > 1:
        found.error(
            IssueCategory.SYNTAX_ERROR,
            "Mixed indentation (tabs and spaces)",
            property_name="pythonCode",
            fix="Use either tabs or spaces consistently, not both",
        )


# ---------------------------------------------------------------------------
# SQL databases and MongoDB
# ---------------------------------------------------------------------------


def _validate_postgres(found: _Findings) -> None:
    _validate_sql_node(found, query_operations=_SQL_OPERATIONS)
    if "connectionTimeout" not in found.config:
        found.suggest("Consider setting connectionTimeout to handle slow connections")
    _add_database_error_handling(found)


def _validate_mysql(found: _Findings) -> None:
    _validate_sql_node(found, query_operations=_SQL_OPERATIONS - {"select"})
    if "timezone" not in found.config:
        found.suggest("Consider setting timezone to ensure consistent date/time handling")
    _add_database_error_handling(found)


def _validate_sql_node(found: _Findings, *, query_operations: frozenset[str]) -> None:
    operation = found.get("operation")
    if operation in query_operations:
        _check_sql_query(found)

    if operation in _SQL_WRITE_OPERATIONS and not found.get("table"):
        preposition = "from" if operation == "delete" else "into"
        found.error(
            IssueCategory.MISSING_REQUIRED,
            f"Table name is required for {operation} operation",
            property_name="table",
            fix=f"Specify the table to {operation} data {preposition}",
        )
    elif operation == "execute" and not found.get("query"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "SQL query is required",
            property_name="query",
            fix="Provide the SQL query to execute",
        )


def _check_sql_query(found: _Findings) -> None:
    query = found.text("query")
    if not query:
        return
    lowered = query.lower()

    if "${" in query or "{{" in query:
        found.warning(
            IssueCategory.SECURITY,
            "Query contains template expressions that might be vulnerable to SQL injection",
            fix="Use parameterized queries with query parameters instead of string interpolation",
        )
    if "delete" in lowered and "where" not in lowered:
        found.error(
            IssueCategory.INVALID_VALUE,
            "DELETE query without WHERE clause will delete all records",
            property_name="query",
            fix="Add a WHERE clause to specify which records to delete",
        )
    if "update" in lowered and "where" not in lowered:
        found.warning(
            IssueCategory.SECURITY,
            "UPDATE query without WHERE clause will update all records",
            fix="Add a WHERE clause to specify which records to update",
        )
    if "drop" in lowered:
        found.error(
            IssueCategory.INVALID_VALUE,
            "DROP operations are extremely dangerous and will permanently delete database objects",
            property_name="query",
            fix="Use this only if you really intend to delete tables/databases permanently",
        )
    if "select *" in lowered:
        found.suggest("Consider selecting specific columns instead of * for better performance")


def _add_database_error_handling(found: _Findings) -> None:
    if found.has_error_handling:
        return
    operation = found.get("operation")
    if operation == "execute":
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "Database queries can fail due to connection issues",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" and retryOnFail: true',
        )
        found.patch(onError="continueRegularOutput", retryOnFail=True, maxTries=3)
    elif operation in _SQL_WRITE_OPERATIONS:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "Database modifications should handle errors carefully",
            property_name="errorHandling",
            fix='Add onError: "stopWorkflow" with retryOnFail for transient failures',
        )
        found.patch(onError="stopWorkflow", retryOnFail=True, maxTries=2)


def _validate_mongodb(found: _Findings) -> None:
    operation = found.get("operation")
    if not found.get("collection"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Collection name is required",
            property_name="collection",
            fix="Specify the MongoDB collection to work with",
        )

    query = found.get("query")
    if operation == "find" and isinstance(query, str) and query:
        try:
            json.loads(query)
        except json.JSONDecodeError:
            found.error(
                IssueCategory.INVALID_VALUE,
                "Query must be valid JSON",
                property_name="query",
                fix='Ensure query is valid JSON like: {"name": "John"}',
            )
    elif operation == "insert" and not found.get("fields") and not found.get("documents"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            "Document data is required for insert",
            property_name="fields",
            fix="Provide the data to insert",
        )
    elif operation == "update" and not query:
        found.warning(
            IssueCategory.SECURITY,
            "Update without query will affect all documents",
            fix="Add a query to target specific documents",
        )
    elif operation == "delete" and (not query or query == "{}"):
        found.error(
            IssueCategory.INVALID_VALUE,
            "Delete without query would remove all documents - this is a critical security issue",
            property_name="query",
            fix="Add a query to specify which documents to delete",
        )

    if not found.has_error_handling:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "MongoDB operations can fail due to connection issues",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" with retryOnFail',
        )
        found.patch(onError="continueRegularOutput", retryOnFail=True, maxTries=3)


# ---------------------------------------------------------------------------
# AI and data shaping nodes
# ---------------------------------------------------------------------------


def _validate_openai(found: _Findings) -> None:
    if found.get("resource") == "chat" and found.get("operation") == "create":
        model = found.get("model")
        if not model:
            found.error(
                IssueCategory.MISSING_REQUIRED,
                "Model selection is required",
                property_name="model",
                fix='Choose a model like "gpt-4", "gpt-3.5-turbo", etc.',
            )
        elif model in _DEPRECATED_OPENAI_MODELS:
            found.warning(
                IssueCategory.DEPRECATED,
                f"Model {model} is deprecated",
                property_name="model",
                fix='Use "gpt-3.5-turbo" or "gpt-4" instead',
            )

        if not found.get("messages") and not found.get("prompt"):
            found.error(
                IssueCategory.MISSING_REQUIRED,
                "Messages or prompt required for chat completion",
                property_name="messages",
                fix="Add messages array or use the prompt field",
            )

        temperature = found.get("temperature")
        if _is_number(temperature) and not 0 <= temperature <= 2:  # type: ignore[operator]
            found.error(
                IssueCategory.INVALID_VALUE,
                "Temperature must be between 0 and 2",
                property_name="temperature",
                fix="Set temperature between 0 (deterministic) and 2 (creative)",
            )

    if not found.has_error_handling:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "AI APIs have rate limits and can return errors",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" with retryOnFail and longer wait times',
        )
        found.patch(
            onError="continueRegularOutput", retryOnFail=True, maxTries=3, waitBetweenTries=5000
        )


def _validate_google_sheets(found: _Findings) -> None:
    operation = found.get("operation")
    range_value = found.text("range")

    if operation == "append":
        if not found.get("range") and not found.get("columns"):
            found.error(
                IssueCategory.MISSING_REQUIRED,
                "Range or columns mapping is required for append operation",
                property_name="range",
                fix='Specify range like "Sheet1!A:B" OR use columns with mappingMode',
            )
        options = found.get("options")
        current = dict(options) if isinstance(options, Mapping) else {}
        if not current.get("valueInputMode"):
            found.warning(
                IssueCategory.MISSING_COMMON,
                "Consider setting valueInputMode for proper data formatting",
                property_name="options.valueInputMode",
                fix='Use "USER_ENTERED" to parse formulas and dates, or "RAW" for literal values',
            )
            found.patch(options={**current, "valueInputMode": "USER_ENTERED"})
    elif operation in ("read", "update") and not found.get("range"):
        found.error(
            IssueCategory.MISSING_REQUIRED,
            f"Range is required for {operation} operation",
            property_name="range",
            fix='Specify range like "Sheet1!A:B" or "Sheet1!A1:B10"',
        )
    elif operation == "delete":
        if not found.get("toDelete"):
            found.error(
                IssueCategory.MISSING_REQUIRED,
                "Specify what to delete (rows or columns)",
                property_name="toDelete",
                fix='Set toDelete to "rows" or "columns"',
            )
        found.warning(
            IssueCategory.SECURITY,
            "Deletion is permanent. Consider backing up data first",
            fix="Read the data before deletion to create a backup",
        )

    if range_value:
        if "!" not in range_value:
            found.warning(
                IssueCategory.INEFFICIENT,
                "Range should include sheet name for clarity",
                property_name="range",
                fix='Format: "SheetName!A1:B10" or "SheetName!A:B"',
            )
        if " " in range_value and _QUOTED_SHEET.match(range_value) is None:
            found.error(
                IssueCategory.INVALID_VALUE,
                "Sheet names with spaces must be quoted",
                property_name="range",
                fix="Use single quotes around sheet name: 'Sheet Name'!A1:B10",
            )


def _validate_set(found: _Findings) -> None:
    json_output = found.get("jsonOutput")
    if isinstance(json_output, str) and json_output and not should_skip_literal_validation(
        json_output
    ):
        try:
            parsed = json.loads(json_output)
        except json.JSONDecodeError as exc:
            found.error(
                IssueCategory.SYNTAX_ERROR,
                f"Invalid JSON in jsonOutput: {exc.msg}",
                property_name="jsonOutput",
                fix="Ensure jsonOutput contains valid JSON syntax",
            )
        else:
            if isinstance(parsed, list):
                found.error(
                    IssueCategory.INVALID_VALUE,
                    "Set node expects a JSON object {}, not an array []",
                    property_name="jsonOutput",
                    fix=(
                        "Either wrap array items as object properties: "
                        '{"items": [...]}, OR use a different approach'
                    ),
                )
            elif isinstance(parsed, dict) and not parsed:
                found.warning(
                    IssueCategory.INEFFICIENT,
                    "jsonOutput is an empty object - this node will output no data",
                    property_name="jsonOutput",
                    fix="Add properties to the object or remove this node if not needed",
                )

    if found.get("mode") == "manual" and not found.get("values") and not json_output:
        found.warning(
            IssueCategory.MISSING_COMMON,
            "Set node has no fields configured - will output empty items",
            fix="Add fields in the Values section or use JSON mode",
        )


def _validate_agent(found: _Findings) -> None:
    if found.get("promptType") == "define":
        text = found.text("text")
        if not text or not text.strip():
            found.error(
                IssueCategory.MISSING_REQUIRED,
                'Custom prompt text is required when promptType is "define"',
                property_name="text",
                fix='Provide a custom prompt in the text field, or change promptType to "auto"',
            )

    system_message = found.text("systemMessage")
    if not system_message or not system_message.strip():
        found.suggest(
            "AI Agent works best with a system message that defines the agent's role, "
            "capabilities, and constraints."
        )
    elif len(system_message) < AGENT_SYSTEM_MESSAGE_MIN_LENGTH:
        found.warning(
            IssueCategory.INEFFICIENT,
            "System message is very short (< 20 characters)",
            property_name="systemMessage",
            fix="Consider a more detailed system message to guide the agent's behavior",
        )

    if "maxIterations" in found.config:
        max_iterations = found.get("maxIterations")
        if not _is_number(max_iterations) or max_iterations < 1:  # type: ignore[operator]
            found.error(
                IssueCategory.INVALID_VALUE,
                "maxIterations must be a positive number",
                property_name="maxIterations",
                fix="Set maxIterations to a value >= 1 (e.g., 10)",
            )
        elif max_iterations > AGENT_MAX_ITERATIONS_THRESHOLD:  # type: ignore[operator]
            found.warning(
                IssueCategory.INEFFICIENT,
                f"maxIterations is set to {max_iterations}. High values can lead to "
                "long execution times and high costs.",
                property_name="maxIterations",
                fix="Consider reducing maxIterations to 10-20 for most use cases",
            )

    if not found.has_error_handling:
        found.warning(
            IssueCategory.BEST_PRACTICE,
            "AI models can fail due to API limits, rate limits, or invalid responses",
            property_name="errorHandling",
            fix='Add onError: "continueRegularOutput" with retryOnFail for resilience',
        )
        found.patch(
            onError="continueRegularOutput", retryOnFail=True, maxTries=2, waitBetweenTries=5000
        )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


NODE_VALIDATORS: Final[Mapping[str, NodeValidator]] = MappingProxyType(
    {
        "nodes-base.slack": _validate_slack,
        "nodes-base.googleSheets": _validate_google_sheets,
        "nodes-base.httpRequest": _validate_http_request,
        "nodes-base.code": _validate_code,
        "nodes-base.openAi": _validate_openai,
        "nodes-base.mongoDb": _validate_mongodb,
        "nodes-base.webhook": _validate_webhook,
        "nodes-base.postgres": _validate_postgres,
        "nodes-base.mySql": _validate_mysql,
        "nodes-base.set": _validate_set,
        "nodes-langchain.agent": _validate_agent,
    }
)


def has_node_validator(node_type: str) -> bool:
    return normalize_node_type(node_type) in NODE_VALIDATORS


def validate_node_specific(node_type: str, config: ConfigSnapshot) -> NodeSpecificResult:
    """Run the node-kind checks registered for ``node_type``, if any."""

    validator = NODE_VALIDATORS.get(normalize_node_type(node_type))
    if validator is None:
        return NodeSpecificResult()
    found = _Findings(config)
    validator(found)
    return found.result()


__all__ = [
    "NODE_VALIDATORS",
    "NodeSpecificResult",
    "has_node_validator",
    "validate_node_specific",
]
