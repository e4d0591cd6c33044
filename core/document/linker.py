"""Semantic linking of parsed expressions into a document."""

from __future__ import annotations

from collections.abc import Iterable

from core.document.models import Document, Item
from core.parse.models import Desc, Expression, Head, Identity, Name
from core.source.models import Span
from core.utils.errors import (
    DuplicateNameError,
    NoIdentityBeforeDescError,
    NoIdentityBeforeNameError,
)


def compile_document(expressions: Iterable[Expression]) -> Document:
    """Fold expressions, in order, into a cross-referenced document.

    Identities and groups are interned by character content, so repeating an
    identity later in the input selects the existing item again.
    """

    document = Document()
    identities: dict[Span, int] = {}
    groups: dict[Span, int] = {}
    current: int | None = None

    for expression in expressions:
        if isinstance(expression, Identity):
            current = identities.get(expression.span)
            if current is None:
                current = len(document.items)
                identities[expression.span] = current
                document.items.append(Item(identity=expression.span))

        elif isinstance(expression, Name):
            if current is None:
                raise NoIdentityBeforeNameError(expression.opening)
            item = document.items[current]
            if item.name is None:
                item.name = expression.text
                document.names[expression.text] = current
            elif item.name != expression.text:
                raise DuplicateNameError(
                    identity=item.identity,
                    existing=item.name,
                    duplicate=expression.text,
                    opening=expression.opening,
                )

        elif isinstance(expression, Head):
            document.headers.append((expression.tag, expression.text))

        elif isinstance(expression, Desc):
            if current is None:
                raise NoIdentityBeforeDescError(expression.opening)
            item = document.items[current]
            item.descriptions.append(expression.text)
            if expression.group:
                item.groups.add(_intern_group(document, groups, expression.group))

    return document


def _intern_group(document: Document, groups: dict[Span, int], group: Span) -> int:
    index = groups.get(group)
    if index is None:
        index = len(document.groups)
        groups[group] = index
        document.groups.append(group)
    return index
