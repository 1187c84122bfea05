"""Detection helpers for workflow expression values (``={{ ... }}``)."""

from __future__ import annotations

import re
from typing import Final

_EXPRESSION_MARKERS: Final[re.Pattern[str]] = re.compile(r"\{\{.*\}\}", re.DOTALL)


def is_expression(value: object) -> bool:
    """Return whether ``value`` is an ``=``-prefixed expression string."""

    return isinstance(value, str) and value.startswith("=")


def contains_expression(value: object) -> bool:
    if not isinstance(value, str):
        return False
    return _EXPRESSION_MARKERS.search(value) is not None


def should_skip_literal_validation(value: object) -> bool:
    """Expressions are resolved at run time, so literal checks do not apply."""

    return is_expression(value) or contains_expression(value)


__all__ = [
    "contains_expression",
    "is_expression",
    "should_skip_literal_validation",
]
