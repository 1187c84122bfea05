"""Executable CLI entrypoint for ``nodeconfig``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING, Final

from nodeconfig.config import SettingsLoadError, SettingsValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    """Process exit codes of the ``nodeconfig`` command."""

    SUCCESS = 0
    VALIDATION_FAILED = 1
    INPUT_ERROR = 2
    INTERNAL_ERROR = 4


# Anywhere in the cause/context chain, these mean the caller supplied bad input.
_INPUT_ERROR_TYPES: Final[tuple[type[BaseException], ...]] = (
    SettingsLoadError,
    SettingsValidationError,
    FileNotFoundError,
    IsADirectoryError,
    PermissionError,
)


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m nodeconfig`` and the console script."""

    try:
        from nodeconfig.ui.cli import run_cli

        return _coerce_exit_code(run_cli(argv))
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return ExitCode.INTERNAL_ERROR.value
    except Exception as exc:  # noqa: BLE001 - CLI boundary normalization.
        exit_code = _route_exception(exc)
        _report_failure(exc, exit_code)
        return exit_code.value


def _coerce_exit_code(raw_code: object) -> int:
    if raw_code is None:
        return ExitCode.SUCCESS.value
    if isinstance(raw_code, int) and not isinstance(raw_code, bool):
        try:
            return ExitCode(raw_code).value
        except ValueError:
            return ExitCode.INTERNAL_ERROR.value
    # argparse and sys.exit("message") carry text instead of a number.
    text = str(raw_code).strip()
    if text:
        print(text, file=sys.stderr)
    return ExitCode.INTERNAL_ERROR.value


def _route_exception(exc: BaseException) -> ExitCode:
    if any(isinstance(item, _INPUT_ERROR_TYPES) for item in _exception_chain(exc)):
        return ExitCode.INPUT_ERROR
    return ExitCode.INTERNAL_ERROR


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` and its explicit causes or implicit contexts, once each."""

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def _report_failure(exc: BaseException, exit_code: ExitCode) -> None:
    if exit_code is ExitCode.INTERNAL_ERROR:
        print("internal error:", file=sys.stderr)
        traceback.print_exception(exc, file=sys.stderr)
        return
    message = str(exc).strip() or type(exc).__name__
    print(f"error: {message}", file=sys.stderr)


__all__ = ["ExitCode", "cli_entrypoint"]
