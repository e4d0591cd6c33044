"""Positioned input characters and source file descriptors."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class PositionedChar:
    """One input character with the place it was read from.

    Only ``value`` takes part in equality and hashing; two occurrences of the
    same character at different positions compare equal.
    """

    value: str
    file: int = field(default=1, compare=False)
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)

    @property
    def location(self) -> str:
        return f"file {self.file}, line {self.line}, column {self.column}"

    def position_detail(self) -> dict[str, object]:
        return {
            "char": self.value,
            "file": self.file,
            "line": self.line,
            "column": self.column,
        }

    def __str__(self) -> str:
        return self.value


Span = tuple[PositionedChar, ...]


def span_text(span: Iterable[PositionedChar]) -> str:
    """Join the character values of a span."""

    return "".join(char.value for char in span)


@dataclass(frozen=True)
class SourceFile:
    """A discovered source file and its numeric ordering key."""

    key: int
    path: Path
