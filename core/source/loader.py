"""Source discovery and reading into positioned characters.

Files of a source directory are ordered by the decimal number their name
starts with (``0`` when the name has no leading digits). Reading assigns
1-based file, line and column numbers and terminates every line with an
explicit ``\\n`` whose column is one past the last character of the line.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TypeVar

from core.source.models import PositionedChar, SourceFile
from core.utils.errors import DuplicateSourceKeyError, SourceLayoutError

T = TypeVar("T")


def source_key(name: str) -> int:
    """Return the numeric ordering key encoded in a file name prefix."""

    digits = []
    for char in name:
        if not ("0" <= char <= "9"):
            break
        digits.append(char)
    return int("".join(digits)) if digits else 0


def order_sources(entries: Iterable[tuple[str, T]]) -> list[tuple[int, T]]:
    """Order ``(name, payload)`` pairs by numeric name prefix.

    Raises:
        DuplicateSourceKeyError: two names share the same numeric key.
    """

    keyed: dict[int, tuple[str, T]] = {}
    for name, payload in entries:
        key = source_key(name)
        previous = keyed.get(key)
        if previous is not None:
            raise DuplicateSourceKeyError(key=key, first=previous[0], second=name)
        keyed[key] = (name, payload)
    return [(key, keyed[key][1]) for key in sorted(keyed)]


def discover_sources(directory: Path) -> list[SourceFile]:
    """List the files of ``directory`` in numeric prefix order."""

    if not directory.is_dir():
        raise SourceLayoutError(f"Source directory not found: {directory}", path=directory)

    entries: list[tuple[str, Path]] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            raise SourceLayoutError(f"Source entry is not a file: {path}", path=path)
        entries.append((path.name, path))

    return [SourceFile(key=key, path=path) for key, path in order_sources(entries)]


def chars_from_text(text: str, file: int = 1) -> list[PositionedChar]:
    """Split text into positioned characters, one explicit newline per line."""

    chars: list[PositionedChar] = []
    for line_index, line in enumerate(_iter_lines(text), start=1):
        column = 0
        for column, value in enumerate(line, start=1):
            chars.append(PositionedChar(value, file=file, line=line_index, column=column))
        chars.append(PositionedChar("\n", file=file, line=line_index, column=column + 1))
    return chars


def read_sources(files: Sequence[SourceFile]) -> list[PositionedChar]:
    """Read source files, in the given order, into one character buffer."""

    chars: list[PositionedChar] = []
    for file_index, source in enumerate(files, start=1):
        text = source.path.read_text(encoding="utf-8")
        chars.extend(chars_from_text(text, file=file_index))
    return chars


def _iter_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
