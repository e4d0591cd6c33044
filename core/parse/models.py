"""Token tree and top-level expression models produced by the parser."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from core.source.models import PositionedChar, Span


@dataclass(frozen=True)
class Char:
    """A plain character."""

    char: PositionedChar


@dataclass(frozen=True)
class EscapedChar:
    """A character written after ``\\``; never has a special meaning."""

    char: PositionedChar


@dataclass(frozen=True)
class Block:
    """``{ ... }``; braces are not rendered."""

    text: Text
    opening: PositionedChar | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Link:
    """``[ ... ]``; rendered as a hyperlink when the content is a known name."""

    text: Text
    opening: PositionedChar | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Paren:
    """``( ... )``; parentheses are rendered."""

    text: Text
    opening: PositionedChar | None = field(default=None, compare=False)


Token = Union[Char, EscapedChar, Block, Link, Paren]

_WRAPPERS: dict[type, tuple[str, str]] = {
    Block: ("{", "}"),
    Link: ("[", "]"),
    Paren: ("(", ")"),
}


@dataclass(frozen=True)
class Text:
    """Ordered tokens of one delimited span of markup.

    Equality and hashing are structural, so two independently parsed texts
    with the same content are interchangeable as mapping keys.
    """

    tokens: tuple[Token, ...] = ()

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def source(self) -> str:
        """Rebuild the markup this text was parsed from."""

        parts: list[str] = []
        for token in self.tokens:
            if isinstance(token, Char):
                parts.append(token.char.value)
            elif isinstance(token, EscapedChar):
                parts.append("\\" + token.char.value)
            else:
                opening, closing = _WRAPPERS[type(token)]
                parts.append(opening + token.text.source() + closing)
        return "".join(parts)


@dataclass(frozen=True)
class Identity:
    """A run of alphanumerics, ``-`` and ``,`` outside any bracket."""

    span: Span

    @property
    def opening(self) -> PositionedChar:
        return self.span[0]


@dataclass(frozen=True)
class Name:
    """A top-level ``[ ... ]``: display name of the preceding identity."""

    text: Text
    opening: PositionedChar = field(compare=False)


@dataclass(frozen=True)
class Head:
    """``\\tag{ ... }``: text wrapped in ``<tag>`` at the top of the document."""

    tag: Span
    text: Text
    opening: PositionedChar = field(compare=False)


@dataclass(frozen=True)
class Desc:
    """``+group{ ... }``: a description of the current item; group may be empty."""

    group: Span
    text: Text
    opening: PositionedChar = field(compare=False)


Expression = Union[Identity, Name, Head, Desc]
