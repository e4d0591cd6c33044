"""HTML renderer for compiled glossary documents."""

from __future__ import annotations

import io
import logging
from typing import TextIO

from core.config.models import Settings
from core.document.models import Document, Item
from core.parse.models import Block, Char, EscapedChar, Link, Paren, Text
from core.render.models import RenderReport, UnresolvedLink
from core.source.models import PositionedChar, span_text
from core.utils.errors import NoDecorationTargetError, NoNameError, UnresolvedLinkError

logger = logging.getLogger("glossc.render")

_SHELL_OPEN = (
    "<!DOCTYPE html><html><head>"
    '<meta charset="{charset}">'
    "<title>{title}</title>"
    '<link rel="stylesheet" type="text/css" href="{stylesheet}">'
    "</head><body>"
)
_SHELL_CLOSE = "</body></html>"
_UNKNOWN_OPENING = PositionedChar("[", file=0, line=0, column=0)


def render_document(document: Document, stream: TextIO, settings: Settings) -> RenderReport:
    """Write the HTML for ``document`` to ``stream``."""

    return HtmlRenderer(document, stream, settings).render()


def render_html(document: Document, settings: Settings) -> tuple[str, RenderReport]:
    """Render ``document`` into a string."""

    buffer = io.StringIO()
    report = render_document(document, buffer, settings)
    return buffer.getvalue(), report


class HtmlRenderer:
    """Serializes a document; text rendering is shared by headers, names and descriptions."""

    def __init__(self, document: Document, stream: TextIO, settings: Settings) -> None:
        self._document = document
        self._stream = stream
        self._settings = settings
        self._decorations = {
            settings.superscript_marker: "sup",
            settings.subscript_marker: "sub",
        }
        self._report = RenderReport()

    def render(self) -> RenderReport:
        settings = self._settings
        self._write(
            _SHELL_OPEN.format(
                charset=settings.charset,
                title=settings.title,
                stylesheet=settings.stylesheet,
            )
        )
        for tag, text in self._document.headers:
            tag_name = span_text(tag)
            self._write(f"<{tag_name}>")
            self.render_text(text)
            self._write(f"</{tag_name}>")
        for item in self._document.items:
            self._render_item(item)
        self._write(_SHELL_CLOSE)
        return self._report

    def render_text(self, text: Text) -> None:
        """Render tokens; a decoration marker applies to the next token only."""

        pending: list[tuple[PositionedChar, str]] = []
        for token in text:
            if isinstance(token, Char):
                tag = self._decorations.get(token.char.value)
                if tag is not None:
                    self._write(f"<{tag}>")
                    pending.append((token.char, tag))
                    continue
                self._write(token.char.value)
            elif isinstance(token, EscapedChar):
                self._write(token.char.value)
            elif isinstance(token, Block):
                self.render_text(token.text)
            elif isinstance(token, Paren):
                self._write("(")
                self.render_text(token.text)
                self._write(")")
            elif isinstance(token, Link):
                self._render_link(token)

            for _, tag in reversed(pending):
                self._write(f"</{tag}>")
            pending.clear()

        if pending:
            raise NoDecorationTargetError(pending[0][0])

    def _render_item(self, item: Item) -> None:
        if item.name is None:
            raise NoNameError(item.identity)

        identity = span_text(item.identity)
        self._write(f'<div class="item"><p class="name" id="{identity}">')
        self.render_text(item.name)
        self._write('</p><p class="group">')
        labels = (span_text(self._document.groups[index]) for index in sorted(item.groups))
        self._write(self._settings.group_separator.join(label for label in labels if label))
        self._write("</p>")
        for description in item.descriptions:
            self._write('<p class="desc">')
            self.render_text(description)
            self._write("</p>")
        self._write("</div>")

    def _render_link(self, link: Link) -> None:
        index = self._document.names.get(link.text)
        if index is not None:
            identity = span_text(self._document.items[index].identity)
            self._write(f'<a href="#{identity}">')
            self.render_text(link.text)
            self._write("</a>")
            return

        target = link.text.source()
        opening = link.opening or _UNKNOWN_OPENING
        if self._settings.unresolved_links == "error":
            raise UnresolvedLinkError(target=target, opening=opening)

        logger.warning("link target '%s' at %s not found", target, opening.location)
        self._report.unresolved_links.append(
            UnresolvedLink(
                target=target,
                file=opening.file,
                line=opening.line,
                column=opening.column,
            )
        )
        self._write('<span class="no_link">')
        self.render_text(link.text)
        self._write("</span>")

    def _write(self, chunk: str) -> None:
        self._stream.write(chunk)
