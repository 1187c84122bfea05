"""Structured logging setup with JSON or console output and secret redaction.

Node parameters routinely carry credentials (API keys, bearer tokens, SQL
connection passwords), so every event passes through :func:`redact_event`
before it is rendered.

structlog renders each event and hands the line to a stdlib logger under the
``nodeconfig`` namespace. That namespace only carries a ``NullHandler`` until
:func:`configure_logging` runs, so importing the engine as a library never
writes to stdout or stderr.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any, Final, TextIO

import structlog

LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")

_PACKAGE_LOGGER: Final[logging.Logger] = logging.getLogger("nodeconfig")
_PACKAGE_LOGGER.addHandler(logging.NullHandler())

_LEVELS: Final[Mapping[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

_MASK: Final[str] = "***REDACTED***"

_SENSITIVE_KEY: Final[re.Pattern[str]] = re.compile(
    r"(?i)secret|token|passw|passphrase|api_?key|authorization|credential|cookie|private_?key"
)

# Applied in order to every string value and to the event text.
_SCRUBBERS: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (
        re.compile(r"(?i)\b(api[_-]?key|token|password|secret|client_secret|authorization)(\s*[:=]\s*)[^\s,;]+"),
        rf"\1\2{_MASK}",
    ),
    (re.compile(r"(?i)\bbearer\s+[\w.~+/-]+=*"), f"Bearer {_MASK}"),
    (re.compile(r"\bsk-[A-Za-z0-9]{12,}\b"), _MASK),
)

_METADATA_KEYS: Final[frozenset[str]] = frozenset({"level", "logger", "timestamp"})


def configure_logging(
    level: int | str = "WARNING",
    fmt: str = "text",
    *,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog once for the process.

    Parameters
    ----------
    level:
        Minimum level name or number (``DEBUG``, ``INFO``, ``WARNING``, ``ERROR``).
    fmt:
        ``json`` for one JSON object per line, ``text`` for console rendering.
    stream:
        Output stream; defaults to ``sys.stderr`` so command output stays clean.
    """

    threshold = _resolve_level(level)
    renderer = _renderer_for(fmt)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            redact_event,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    _PACKAGE_LOGGER.handlers[:] = [handler]
    _PACKAGE_LOGGER.setLevel(threshold)
    _PACKAGE_LOGGER.propagate = False


def reset_logging() -> None:
    """Restore structlog defaults and drop bound context."""

    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    _PACKAGE_LOGGER.handlers[:] = [logging.NullHandler()]
    _PACKAGE_LOGGER.setLevel(logging.NOTSET)
    _PACKAGE_LOGGER.propagate = True


def get_logger(name: str) -> Any:
    """Return a structlog logger writing through the stdlib logger ``name``.

    Use a name under ``nodeconfig`` so :func:`configure_logging` controls it.
    """

    return structlog.wrap_logger(logging.getLogger(name))


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Bind non-blank ``fields`` to every event logged inside the ``with`` block."""

    cleaned = {name: value.strip() for name, value in fields.items() if value and value.strip()}
    tokens = structlog.contextvars.bind_contextvars(**cleaned)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


def redact_event(
    _logger: object, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor that masks secret-looking keys and values."""

    for key, value in list(event_dict.items()):
        if key in _METADATA_KEYS:
            continue
        if key == "event":
            event_dict[key] = _scrub(value) if isinstance(value, str) else value
            continue
        event_dict[key] = redact_value(value, key_context=key)
    return event_dict


def redact_value(value: object, *, key_context: str | None = None) -> object:
    if key_context and _SENSITIVE_KEY.search(key_context):
        return _MASK
    if isinstance(value, str):
        return _scrub(value)
    if isinstance(value, Mapping):
        return {str(key): redact_value(item, key_context=str(key)) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_value(item) for item in value]
    return value


def _scrub(text: str) -> str:
    for pattern, replacement in _SCRUBBERS:
        text = pattern.sub(replacement, text)
    return text


def _resolve_level(level: int | str) -> int:
    if isinstance(level, bool) or not isinstance(level, (int, str)):
        raise ValueError(f"level must be int or str, got {type(level).__name__}")
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[level.strip().upper()]
    except KeyError:
        raise ValueError(f"unsupported logging level {level!r}") from None


def _renderer_for(fmt: str) -> Any:
    normalized = fmt.strip().lower()
    if normalized == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    if normalized == "text":
        return structlog.dev.ConsoleRenderer(colors=False)
    raise ValueError(f"unsupported log format {fmt!r}; expected one of: {', '.join(LOG_FORMATS)}")


__all__ = [
    "LOG_FORMATS",
    "configure_logging",
    "correlation_scope",
    "get_logger",
    "redact_event",
    "redact_value",
    "reset_logging",
]
