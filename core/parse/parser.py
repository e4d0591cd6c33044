"""Recursive-descent parser for glossary markup.

Top-level constructs:
- ``identity``: alphanumerics, ``-`` and ``,``
- ``[name]``: display name of the preceding identity
- ``+group{description}``: description, optionally tagged with a group
- ``\\tag{header}``: text wrapped in ``<tag>`` at the top of the document

Inside any bracket, ``{}``/``[]``/``()`` nest and ``\\`` escapes one character.
Nesting is capped at ``MAX_NESTING`` brackets, counting the outermost one.

Identity characters and top-level separators follow Python's ``str.isalnum``
and ``str.isspace``. Both are Unicode-aware: ``é`` and the fullwidth ``２`` are
identity characters, and ``\\x1c`` through ``\\x1f`` count as separators.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.parse.models import (
    Block,
    Char,
    Desc,
    EscapedChar,
    Expression,
    Head,
    Identity,
    Link,
    Name,
    Paren,
    Text,
    Token,
)
from core.source.models import PositionedChar, Span
from core.utils.errors import (
    BracketsDoNotMatchError,
    NestingTooDeepError,
    NoClosingBracketError,
    UnexpectedCharacterError,
    UnexpectedEndOfFileError,
)

MAX_NESTING = 200

_ESCAPE = "\\"
_DESC_PREFIX = "+"
_HEAD_PREFIX = "\\"
_PREFIX_END = "{"
_IDENTITY_PUNCTUATION = frozenset("-,")
_NESTED = {
    "{": ("}", Block),
    "[": ("]", Link),
    "(": (")", Paren),
}
_CLOSERS = frozenset(closer for closer, _ in _NESTED.values())


class Cursor:
    """Forward-only position in the input, shared by all recursive calls."""

    def __init__(self, chars: Sequence[PositionedChar]) -> None:
        self._chars = chars
        self.index = 0

    def next(self) -> PositionedChar | None:
        if self.index >= len(self._chars):
            return None
        char = self._chars[self.index]
        self.index += 1
        return char

    def span(self, start: int, end: int | None = None) -> Span:
        return tuple(self._chars[start:end])

    def at(self, index: int) -> PositionedChar:
        return self._chars[index]


def parse_source(chars: Sequence[PositionedChar]) -> list[Expression]:
    """Parse positioned characters into top-level expressions."""

    return Parser(chars).parse()


class Parser:
    def __init__(self, chars: Sequence[PositionedChar]) -> None:
        self._cursor = Cursor(chars)

    def parse(self) -> list[Expression]:
        cursor = self._cursor
        expressions: list[Expression] = []
        identity_start: int | None = None
        prefix_start: int | None = None

        while True:
            index = cursor.index
            char = cursor.next()
            if char is None:
                break

            if prefix_start is not None:
                if char.value == _PREFIX_END:
                    expressions.append(self._finish_prefix(prefix_start, index, char))
                    prefix_start = None
                continue

            if _is_identity_char(char.value):
                if identity_start is None:
                    identity_start = index
                continue

            if identity_start is not None:
                expressions.append(Identity(cursor.span(identity_start, index)))
                identity_start = None

            if char.value in (_DESC_PREFIX, _HEAD_PREFIX):
                prefix_start = index
            elif char.value == "[":
                expressions.append(Name(self.parse_block(char, "]"), opening=char))
            elif not char.value.isspace():
                raise UnexpectedCharacterError(char)

        if prefix_start is not None:
            raise UnexpectedEndOfFileError(cursor.at(prefix_start))
        if identity_start is not None:
            expressions.append(Identity(cursor.span(identity_start)))

        return expressions

    def parse_block(self, opening: PositionedChar, delimiter: str, depth: int = 1) -> Text:
        """Parse up to ``delimiter``; ``opening`` is kept for diagnostics only."""

        cursor = self._cursor
        tokens: list[Token] = []

        while True:
            char = cursor.next()
            if char is None:
                break

            value = char.value
            if value == _ESCAPE:
                escaped = cursor.next()
                if escaped is None:
                    break
                tokens.append(EscapedChar(escaped))
            elif value in _NESTED:
                if depth >= MAX_NESTING:
                    raise NestingTooDeepError(char, limit=MAX_NESTING)
                closer, wrapper = _NESTED[value]
                nested = self.parse_block(char, closer, depth + 1)
                tokens.append(wrapper(nested, opening=char))
            elif value == delimiter:
                return Text(tuple(tokens))
            elif value in _CLOSERS:
                raise BracketsDoNotMatchError(opening, char)
            else:
                tokens.append(Char(char))

        raise NoClosingBracketError(opening)

    def _finish_prefix(self, start: int, end: int, brace: PositionedChar) -> Expression:
        opening = self._cursor.at(start)
        label = self._cursor.span(start + 1, end)
        text = self.parse_block(brace, "}")
        if opening.value == _DESC_PREFIX:
            return Desc(group=label, text=text, opening=opening)
        return Head(tag=label, text=text, opening=opening)


def _is_identity_char(value: str) -> bool:
    return value.isalnum() or value in _IDENTITY_PUNCTUATION
