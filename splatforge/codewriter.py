"""A small helper that accumulates brace-indented source text."""

from __future__ import annotations

from typing import Iterable

__all__ = ["CodeWriter"]

_INDENT = "    "


class CodeWriter:
    """Collects lines, indenting them by the current brace depth.

    Each closing brace on a line lowers the depth before the line is written.
    Each opening brace raises it for the lines that follow.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._indent = 0

    def add_line(self, line: str) -> None:
        """Append one line at the current indentation."""
        depth = self._indent - line.count("}")
        if depth < 0:
            raise ValueError(f"unbalanced closing brace in line: {line!r}")
        self._parts.append(f"{_INDENT * depth}{line}\n")
        self._indent = depth + line.count("{")

    def add_lines(self, lines: Iterable[str]) -> None:
        """Append several lines in order."""
        for line in lines:
            self.add_line(line)

    def text(self) -> str:
        """Return everything written so far."""
        return "".join(self._parts)