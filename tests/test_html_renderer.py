from __future__ import annotations

import io
import logging

import pytest

from core.config.models import Settings
from core.config.settings_loader import load_settings
from core.document.linker import compile_document
from core.document.models import Document
from core.parse.parser import MAX_NESTING, parse_source
from core.render.html_renderer import render_document, render_html
from core.render.models import RenderReport
from core.source.loader import chars_from_text
from core.utils.errors import NoDecorationTargetError, NoNameError, UnresolvedLinkError

SHELL_OPEN = (
    '<!DOCTYPE html><html><head><meta charset="utf-8">'
    "<title>化合物から見る代謝経路</title>"
    '<link rel="stylesheet" type="text/css" href="style.css"></head><body>'
)
SHELL_CLOSE = "</body></html>"


def _settings(**overrides: object) -> Settings:
    return load_settings().model_copy(update=overrides)


def _render(text: str, **overrides: object) -> tuple[str, RenderReport]:
    document = compile_document(parse_source(chars_from_text(text)))
    return render_html(document, _settings(**overrides))


def _desc_html(desc: str) -> str:
    html, _ = _render(f"x [X] +{{{desc}}}")
    prefix = SHELL_OPEN + '<div class="item"><p class="name" id="x">X</p><p class="group"></p>'
    assert html.startswith(prefix)
    assert html.endswith("</div>" + SHELL_CLOSE)
    body = html[len(prefix) : -len("</div>" + SHELL_CLOSE)]
    assert body.startswith('<p class="desc">') and body.endswith("</p>")
    return body[len('<p class="desc">') : -len("</p>")]


def test_empty_document_renders_shell() -> None:
    html, report = render_html(Document(), load_settings())

    assert html == SHELL_OPEN + SHELL_CLOSE
    assert report.unresolved_links == []


def test_self_referencing_item() -> None:
    html, report = _render("id [Name] +group{ text with [Name] ref }")

    assert html == (
        SHELL_OPEN
        + '<div class="item"><p class="name" id="id">Name</p>'
        + '<p class="group">group</p>'
        + '<p class="desc"> text with <a href="#id">Name</a> ref </p></div>'
        + SHELL_CLOSE
    )
    assert report.unresolved_links == []


def test_headers_come_first_in_declaration_order() -> None:
    html, _ = _render("\\h1{Metabolism}\na [A]\n\\p{Intro}")

    assert html == (
        SHELL_OPEN
        + "<h1>Metabolism</h1><p>Intro</p>"
        + '<div class="item"><p class="name" id="a">A</p><p class="group"></p></div>'
        + SHELL_CLOSE
    )


def test_superscript_applies_to_next_token_only() -> None:
    assert _desc_html("CO^2x") == "CO<sup>2</sup>x"


def test_subscript_block_wraps_whole_block() -> None:
    assert _desc_html("_{A B}") == "<sub>A B</sub>"


def test_stacked_markers_close_in_reverse_order() -> None:
    assert _desc_html("^_x") == "<sup><sub>x</sub></sup>"


def test_decorated_link() -> None:
    assert _desc_html("^[X]") == '<sup><a href="#x">X</a></sup>'


def test_escaped_marker_is_literal() -> None:
    assert _desc_html("a\\^b") == "a^b"


def test_paren_is_rendered_and_block_is_not() -> None:
    assert _desc_html("(a){b}") == "(a)b"


def test_trailing_marker_fails() -> None:
    with pytest.raises(NoDecorationTargetError) as exc_info:
        _render("x [X] +{CO^}")

    assert exc_info.value.marker.value == "^"
    assert exc_info.value.marker.column == 11


def test_trailing_marker_reports_first_unclosed() -> None:
    with pytest.raises(NoDecorationTargetError) as exc_info:
        _render("x [X] +{a^_}")

    assert exc_info.value.marker.value == "^"


def test_trailing_marker_inside_block_fails() -> None:
    with pytest.raises(NoDecorationTargetError):
        _render("x [X] +{{a_} b}")


def test_missing_name_fails() -> None:
    with pytest.raises(NoNameError) as exc_info:
        _render("a [A] b +{text}")

    assert "`b`" in str(exc_info.value)


def test_groups_sorted_by_intern_index_and_joined() -> None:
    html, _ = _render("a [A] +g1{x}\nb [B] +g2{y} +g1{z}")

    assert '<p class="name" id="b">B</p><p class="group">g1・g2</p>' in html


def test_custom_group_separator() -> None:
    html, _ = _render("a [A] +g1{x} +g2{y}", group_separator=", ")

    assert '<p class="group">g1, g2</p>' in html


def test_custom_markers() -> None:
    html, _ = _render("x [X] +{a!b~c}", superscript_marker="!", subscript_marker="~")

    assert "a<sup>b</sup><sub>c</sub>" in html


def test_unresolved_link_degrades_with_one_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="glossc.render")

    html, report = _render("x [X] +{see [Nothing]}")

    assert '<p class="desc">see <span class="no_link">Nothing</span></p>' in html
    records = [record for record in caplog.records if record.name == "glossc.render"]
    assert len(records) == 1
    assert "Nothing" in records[0].getMessage()
    assert len(report.unresolved_links) == 1
    assert report.unresolved_links[0].target == "Nothing"
    assert report.unresolved_links[0].line == 1
    assert report.unresolved_links[0].column == 13


def test_unresolved_link_strict_mode_fails() -> None:
    with pytest.raises(UnresolvedLinkError) as exc_info:
        _render("x [X] +{see [Nothing]}", unresolved_links="error")

    assert exc_info.value.target == "Nothing"


def test_link_matches_structurally_including_nested_markup() -> None:
    html, _ = _render("h2o [H_2O]\nw [W] +{see [H_2O]}")

    assert '<a href="#h2o">H<sub>2</sub>O</a>' in html


def test_render_document_streams_to_writer() -> None:
    document = compile_document(parse_source(chars_from_text("a [A]")))
    stream = io.StringIO()

    report = render_document(document, stream, load_settings())

    assert stream.getvalue().startswith(SHELL_OPEN)
    assert report.unresolved_links == []


def test_deepest_accepted_nesting_renders_and_links() -> None:
    depth = MAX_NESTING - 2
    name = "(" * depth + "N" + ")" * depth
    html, report = _render(f"n [{name}]\nx [X] +{{see [{name}]}}")

    assert f'<a href="#n">{name}</a>' in html
    assert report.unresolved_links == []
