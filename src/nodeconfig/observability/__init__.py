"""Public observability primitives: structlog configuration and redaction."""

from nodeconfig.observability.logging import (
    LOG_FORMATS,
    configure_logging,
    correlation_scope,
    get_logger,
    redact_event,
    redact_value,
    reset_logging,
)

__all__ = [
    "LOG_FORMATS",
    "configure_logging",
    "correlation_scope",
    "get_logger",
    "redact_event",
    "redact_value",
    "reset_logging",
]
