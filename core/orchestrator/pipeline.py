"""Orchestration pipeline: parse -> compile -> render, fully in memory."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from core.config.models import Settings
from core.document.linker import compile_document
from core.parse.parser import parse_source
from core.render.html_renderer import render_html
from core.render.models import BuildOutput, BuildReport
from core.source.loader import chars_from_text, order_sources
from core.source.models import PositionedChar

logger = logging.getLogger("glossc.pipeline")


def build_glossary(chars: Sequence[PositionedChar], settings: Settings) -> BuildOutput:
    """Compile positioned characters into HTML without touching the filesystem.

    Fatal errors propagate unchanged; the caller commits ``html`` only when
    this returns.
    """

    expressions = parse_source(chars)
    logger.debug("parsed %d expressions from %d characters", len(expressions), len(chars))

    document = compile_document(expressions)
    logger.debug(
        "linked %d items, %d headers, %d groups",
        len(document.items),
        len(document.headers),
        len(document.groups),
    )

    html, render_report = render_html(document, settings)
    report = BuildReport.from_render(document, render_report)
    logger.info(
        "rendered %d items (unresolved links: %d)",
        report.item_count,
        report.unresolved_count,
    )
    return BuildOutput(html=html, document=document, report=report)


def build_from_texts(sources: Sequence[tuple[str, str]], settings: Settings) -> BuildOutput:
    """Build from in-memory ``(name, content)`` sources ordered by numeric name prefix."""

    chars: list[PositionedChar] = []
    for file_index, (_, content) in enumerate(order_sources(sources), start=1):
        chars.extend(chars_from_text(content, file=file_index))
    return build_glossary(chars, settings)
