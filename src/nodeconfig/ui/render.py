"""Output rendering for the nodeconfig CLI.

File: src/nodeconfig/ui/render.py

Purpose
- Provide a thin plain-text rendering layer for validation reports, property
  views and visibility tables.

Functional requirements
- Output is deterministic for identical inputs.
- Every write goes to the stream the renderer was created with.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nodeconfig.domain.models import SimplifiedProperty, ValidationIssue

_INDENT = "  "


class CLIRenderer:
    """Plain-text writer for reports, property listings and visibility tables."""

    def __init__(self, *, verbose: bool = False, stream: TextIO | None = None) -> None:
        self.verbose = verbose
        self._stream = stream or sys.stdout

    def _emit(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self._stream)

    def kv(self, key: str, value: object) -> None:
        self._emit(f"{key}: {value}")

    def text(self, line: str) -> None:
        self._emit(line)

    def section(self, title: str) -> None:
        self._emit("", title)

    def items(self, entries: Iterable[str], *, bullet: str = "-") -> None:
        self._emit(*(f"{_INDENT}{bullet} {entry}" for entry in entries))

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Print a column-aligned table; nothing at all when ``rows`` is empty."""

        if not rows:
            return
        grid = [list(headers)] + [
            [str(cell) for cell in row[: len(headers)]] + [""] * (len(headers) - len(row))
            for row in rows
        ]
        widths = [max(len(line[col]) for line in grid) for col in range(len(headers))]

        def fmt(cells: Sequence[str]) -> str:
            return _INDENT + "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

        if title:
            self.section(title)
        self._emit(fmt(grid[0]), fmt(["-" * width for width in widths]))
        self._emit(*(fmt(line) for line in grid[1:]))

    def issues(self, title: str, entries: Sequence[ValidationIssue]) -> None:
        """Print issues with their property, code (verbose only) and fix hint."""

        if not entries:
            return
        self.section(title)
        for issue in entries:
            where = f"[{issue.property_name}] " if issue.property_name else ""
            code = f" ({issue.code})" if self.verbose and issue.code else ""
            self._emit(f"{_INDENT}- {where}{issue.message}{code}")
            if issue.fix:
                self._emit(f"{_INDENT * 3}fix: {issue.fix}")

    def properties(self, title: str, entries: Sequence[SimplifiedProperty]) -> None:
        if not entries:
            self.section(title)
            self._emit(f"{_INDENT}(none)")
            return
        rows = [
            (prop.path or prop.name, prop.type, "yes" if prop.required else "", prop.description)
            for prop in entries
        ]
        self.table(("name", "type", "required", "description"), rows, title=title)

    def next_steps(self, steps: Sequence[str]) -> None:
        if steps:
            self.section("Next steps:")
            self.items(steps, bullet=">")


def create_renderer(*, verbose: bool = False, stream: TextIO | None = None) -> CLIRenderer:
    return CLIRenderer(verbose=verbose, stream=stream)


__all__ = ["CLIRenderer", "create_renderer"]
