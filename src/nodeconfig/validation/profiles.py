"""
nodeconfig — validation profile selection and result filtering.

File: src/nodeconfig/validation/profiles.py

Purpose
- Map a profile name (minimal / runtime / strict) to the rule subset a single
  validation call runs, and filter the accumulated findings accordingly.

Functional requirements
- Profile selection is a pure per-call input; there is no stored mode.
- ``strict`` elevates security warnings and selected tool warnings to errors.
- Deduplication keeps the more specific of two errors about the same property.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from nodeconfig.domain.models import (
    IssueCategory,
    Severity,
    ValidationIssue,
    ValidationMode,
    ValidationProfile,
)

ELEVATED_CODES: Final[frozenset[str]] = frozenset(
    {
        "SHORT_TOOL_DESCRIPTION",
        "MISSING_PLACEHOLDER_DEFINITIONS",
        "MISSING_TOOL_CREDENTIALS",
    }
)

STRICT_CLEAN_SUGGESTIONS: Final[tuple[str, ...]] = (
    "Consider adding error handling with onError property and timeout configuration",
    "Add authentication if connecting to external services",
)

_NOTICE_CATEGORIES: Final[frozenset[IssueCategory]] = frozenset(
    {IssueCategory.SECURITY, IssueCategory.DEPRECATED}
)


@dataclass(frozen=True, slots=True)
class ProfileRules:
    """Rule subset active for one profile."""

    profile: ValidationProfile
    property_mode: ValidationMode
    node_specific: bool
    tool_validators: bool
    elevate: bool
    keep_all: bool
    error_categories: frozenset[IssueCategory] = frozenset()
    warning_categories: frozenset[IssueCategory] = frozenset()
    keep_uncategorized: bool = False
    keep_suggestions: bool = False


PROFILE_RULES: Final[Mapping[ValidationProfile, ProfileRules]] = MappingProxyType(
    {
        ValidationProfile.MINIMAL: ProfileRules(
            profile=ValidationProfile.MINIMAL,
            property_mode=ValidationMode.MINIMAL,
            node_specific=False,
            tool_validators=False,
            elevate=False,
            keep_all=False,
            error_categories=frozenset(
                {IssueCategory.MISSING_REQUIRED, IssueCategory.INVALID_TYPE}
            ),
            warning_categories=_NOTICE_CATEGORIES,
        ),
        ValidationProfile.RUNTIME: ProfileRules(
            profile=ValidationProfile.RUNTIME,
            property_mode=ValidationMode.OPERATION,
            node_specific=True,
            tool_validators=False,
            elevate=False,
            keep_all=False,
            error_categories=frozenset(
                {
                    IssueCategory.MISSING_REQUIRED,
                    IssueCategory.INVALID_VALUE,
                    IssueCategory.INVALID_TYPE,
                }
            ),
            warning_categories=_NOTICE_CATEGORIES,
            keep_uncategorized=True,
        ),
        ValidationProfile.STRICT: ProfileRules(
            profile=ValidationProfile.STRICT,
            property_mode=ValidationMode.OPERATION,
            node_specific=True,
            tool_validators=True,
            elevate=True,
            keep_all=True,
            keep_uncategorized=True,
            keep_suggestions=True,
        ),
    }
)


def select_profile(name: str | ValidationProfile) -> ValidationProfile:
    """Parse a profile name; unknown names raise ``ValueError``."""

    if isinstance(name, ValidationProfile):
        return name
    if not isinstance(name, str):
        raise TypeError(f"profile must be a string, got {type(name).__name__}")
    try:
        return ValidationProfile(name.strip().lower())
    except ValueError:
        choices = ", ".join(item.value for item in ValidationProfile)
        raise ValueError(f"unknown validation profile {name!r}; expected one of: {choices}") from None


def rules_for(profile: str | ValidationProfile) -> ProfileRules:
    return PROFILE_RULES[select_profile(profile)]


def _kept(issue: ValidationIssue, rules: ProfileRules) -> bool:
    if rules.keep_all:
        return True
    if issue.category is None:
        return rules.keep_uncategorized
    if issue.is_error:
        return issue.category in rules.error_categories
    return issue.category in rules.warning_categories


def _elevated(issue: ValidationIssue) -> ValidationIssue:
    if issue.severity is not Severity.WARNING:
        return issue
    if issue.category is IssueCategory.SECURITY or issue.code in ELEVATED_CODES:
        return issue.with_severity(Severity.ERROR)
    return issue


def apply_profile_filter(
    issues: Iterable[ValidationIssue],
    suggestions: Iterable[str],
    rules: ProfileRules,
) -> tuple[tuple[ValidationIssue, ...], tuple[str, ...]]:
    """Return ``(issues, suggestions)`` as seen through ``rules``."""

    kept = [issue for issue in issues if _kept(issue, rules)]
    if rules.elevate:
        kept = [_elevated(issue) for issue in kept]

    kept_suggestions = list(suggestions) if rules.keep_suggestions else []
    if rules.profile is ValidationProfile.STRICT and not kept:
        kept_suggestions.extend(STRICT_CLEAN_SUGGESTIONS)
    return tuple(kept), tuple(kept_suggestions)


def _specificity(issue: ValidationIssue) -> int:
    return len(issue.message) + len(issue.fix or "")


def deduplicate_issues(issues: Iterable[ValidationIssue]) -> tuple[ValidationIssue, ...]:
    """Collapse errors sharing property and category, keeping the most specific.

    Uncategorized issues, warnings and infos pass through untouched.
    """

    slots: dict[object, ValidationIssue] = {}
    for index, issue in enumerate(issues):
        if issue.is_error and issue.category is not None:
            key: object = (issue.property_name, issue.category)
            current = slots.get(key)
            if current is None or _specificity(issue) > _specificity(current):
                slots[key] = issue
        else:
            slots[("passthrough", index)] = issue
    return tuple(slots.values())


def generate_next_steps(issues: Sequence[ValidationIssue]) -> tuple[str, ...]:
    errors = [issue for issue in issues if issue.is_error]
    warnings = [issue for issue in issues if issue.is_warning]
    steps: list[str] = []

    missing = [issue for issue in errors if issue.category is IssueCategory.MISSING_REQUIRED]
    if missing:
        steps.append(f"Add required fields: {_joined_properties(missing)}")

    mistyped = [issue for issue in errors if issue.category is IssueCategory.INVALID_TYPE]
    if mistyped:
        fixes = ", ".join(
            f"{issue.property_name} should be {issue.fix or 'correct type'}" for issue in mistyped
        )
        steps.append(f"Fix type mismatches: {fixes}")

    invalid = [issue for issue in errors if issue.category is IssueCategory.INVALID_VALUE]
    if invalid:
        steps.append(f"Correct invalid values: {_joined_properties(invalid)}")

    if warnings and not errors:
        steps.append("Consider addressing warnings for better reliability")
    if errors:
        steps.append("Fix the errors above following the provided suggestions")
    return tuple(steps)


def _joined_properties(issues: Iterable[ValidationIssue]) -> str:
    return ", ".join(issue.property_name or "?" for issue in issues)


__all__ = [
    "ELEVATED_CODES",
    "PROFILE_RULES",
    "ProfileRules",
    "apply_profile_filter",
    "deduplicate_issues",
    "generate_next_steps",
    "rules_for",
    "select_profile",
]
