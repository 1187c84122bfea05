"""Projection of raw property descriptors into compact, human-oriented views."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from nodeconfig.constants import MAX_SHOW_WHEN_FIELDS, MAX_SIMPLIFIED_OPTIONS
from nodeconfig.domain.models import (
    PropertyDescriptor,
    PropertyType,
    SimplifiedOption,
    SimplifiedProperty,
)

# Keys are lowercase property names; checked exactly, then as substrings in order.
FIELD_DESCRIPTIONS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "url": "The URL to make the request to",
        "method": "HTTP method to use for the request",
        "authentication": "Authentication method to use",
        "sendbody": "Whether to send a request body",
        "contenttype": "Content type of the request body",
        "sendheaders": "Whether to send custom headers",
        "jsonbody": "JSON data to send in the request body",
        "headers": "Custom headers to send with the request",
        "timeout": "Request timeout in milliseconds",
        "query": "SQL query to execute",
        "table": "Database table name",
        "operation": "Operation to perform",
        "path": "Webhook path or file path",
        "httpmethod": "HTTP method to accept",
        "responsemode": "How to respond to the webhook",
        "responsecode": "HTTP response code to return",
        "channel": "Slack channel to send message to",
        "text": "Text content of the message",
        "subject": "Email subject line",
        "fromemail": "Sender email address",
        "toemail": "Recipient email address",
        "language": "Programming language to use",
        "jscode": "JavaScript code to execute",
        "pythoncode": "Python code to execute",
    }
)

_TYPE_SENTENCES: Final[Mapping[str, str]] = MappingProxyType(
    {
        PropertyType.BOOLEAN: "Enable or disable {label}",
        PropertyType.OPTIONS: "Select {label}",
        PropertyType.STRING: "Enter {label}",
        PropertyType.NUMBER: "Number value for {label}",
        PropertyType.JSON: "JSON data for {label}",
    }
)

_OPTION_TYPES: Final[frozenset[str]] = frozenset(
    {PropertyType.OPTIONS, PropertyType.MULTI_OPTIONS}
)


def simplify_property(
    descriptor: PropertyDescriptor,
    *,
    path: str | None = None,
    max_options: int = MAX_SIMPLIFIED_OPTIONS,
) -> SimplifiedProperty:
    """Build the display projection of ``descriptor``."""

    keep_default = descriptor.has_default and (
        descriptor.type in _OPTION_TYPES
        or (
            descriptor.default is not None
            and not isinstance(descriptor.default, (Mapping, list, tuple))
        )
    )

    options: tuple[SimplifiedOption, ...] | None = None
    if descriptor.options:
        options = tuple(_simplify_option(item) for item in descriptor.options[:max_options])

    show_when = None
    rules = descriptor.display_options
    if rules is not None and rules.show and len(rules.show) <= MAX_SHOW_WHEN_FIELDS:
        show_when = dict(rules.show)

    return SimplifiedProperty(
        name=descriptor.name,
        display_name=descriptor.label,
        type=descriptor.type or PropertyType.STRING.value,
        description=extract_description(descriptor),
        required=descriptor.required,
        default=descriptor.default if keep_default else None,
        has_default=keep_default,
        options=options,
        placeholder=descriptor.placeholder,
        show_when=show_when,
        usage_hint=generate_usage_hint(descriptor),
        path=path,
    )


def extract_description(descriptor: PropertyDescriptor) -> str:
    explicit = (
        descriptor.description
        or descriptor.hint
        or descriptor.placeholder
        or descriptor.display_name
    )
    if explicit:
        return explicit
    return generate_description(descriptor)


def generate_description(descriptor: PropertyDescriptor) -> str:
    """Derive a description from the field-name table, then from the type."""

    name = descriptor.name.lower()
    known = FIELD_DESCRIPTIONS.get(name)
    if known is not None:
        return known
    for key, text in FIELD_DESCRIPTIONS.items():
        if key in name:
            return text

    label = descriptor.display_name or name
    template = _TYPE_SENTENCES.get(descriptor.type, "Configure {label}")
    return template.format(label=label)


def generate_usage_hint(descriptor: PropertyDescriptor) -> str | None:
    name = descriptor.name
    if "url" in name.lower() or name == "endpoint":
        return "Enter the full URL including https://"
    if "auth" in name or "credential" in name:
        return "Select authentication method or credentials"
    if descriptor.type == PropertyType.JSON or "json" in name:
        return "Enter valid JSON data"
    if descriptor.type == PropertyType.CODE or "code" in name:
        return "Enter your code here"
    if descriptor.type == PropertyType.BOOLEAN and descriptor.display_options is not None:
        return "Enabling this will show additional options"
    return None


def _simplify_option(option: object) -> SimplifiedOption:
    if isinstance(option, Mapping):
        value = option.get("value") or option.get("name")
        label = option.get("name") or option.get("value") or option.get("displayName")
        return SimplifiedOption(value=value, label=label)
    return SimplifiedOption(value=option, label=option)


__all__ = [
    "FIELD_DESCRIPTIONS",
    "extract_description",
    "generate_description",
    "generate_usage_hint",
    "simplify_property",
]
