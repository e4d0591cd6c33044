"""Linked document model: items, headers, groups and the name index."""

from __future__ import annotations

from dataclasses import dataclass, field

from core.parse.models import Text
from core.source.models import Span


@dataclass
class Item:
    """One glossary entry."""

    identity: Span
    name: Text | None = None
    descriptions: list[Text] = field(default_factory=list)
    groups: set[int] = field(default_factory=set)


@dataclass
class Document:
    """Compiled glossary.

    Rules:
    - every ``names`` entry points to an item whose ``name`` equals the key
    - every index in ``Item.groups`` is valid for ``groups``
    """

    headers: list[tuple[Span, Text]] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    groups: list[Span] = field(default_factory=list)
    names: dict[Text, int] = field(default_factory=dict)
