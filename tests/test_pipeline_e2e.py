from __future__ import annotations

import logging

import pytest

from core.config.settings_loader import load_settings
from core.orchestrator.pipeline import build_from_texts, build_glossary
from core.source.loader import chars_from_text
from core.utils.errors import (
    BracketsDoNotMatchError,
    DuplicateSourceKeyError,
    NestingTooDeepError,
    NoIdentityBeforeDescError,
    NoNameError,
)


def test_build_glossary_returns_html_and_report() -> None:
    source = (
        "\\h1{Metabolism}\n"
        "glucose [Glucose] +glycolysis{Oxidised to [Pyruvate].}\n"
        "pyruvate [Pyruvate] +glycolysis{C_3H_4O_3} +TCA{Enters via [Acetyl-CoA].}\n"
    )

    output = build_glossary(chars_from_text(source), load_settings())

    assert output.report.item_count == 2
    assert output.report.header_count == 1
    assert output.report.group_count == 2
    assert output.report.unresolved_count == 1
    assert output.report.unresolved_links[0].target == "Acetyl-CoA"
    assert '<a href="#pyruvate">Pyruvate</a>' in output.html
    assert "C<sub>3</sub>H<sub>4</sub>O<sub>3</sub>" in output.html
    assert '<p class="group">glycolysis・TCA</p>' in output.html


def test_build_from_texts_orders_files_by_prefix() -> None:
    output = build_from_texts(
        [
            ("2_second.txt", "b [B] +{after [A]}\na +{more}\n"),
            ("1_first.txt", "a [A] +{first}\n"),
        ],
        load_settings(),
    )

    html = output.html
    assert html.index('id="a"') < html.index('id="b"')
    assert '<a href="#a">A</a>' in html
    assert '<p class="desc">first</p><p class="desc">more</p>' in html


def test_errors_carry_file_index() -> None:
    with pytest.raises(BracketsDoNotMatchError) as exc_info:
        build_from_texts(
            [("1_ok.txt", "a [A]\n"), ("2_bad.txt", "b [B}\n")],
            load_settings(),
        )

    assert exc_info.value.opening.file == 2
    assert exc_info.value.closing.file == 2
    assert exc_info.value.detail()["closing"]["column"] == 5


def test_duplicate_prefix_is_rejected() -> None:
    with pytest.raises(DuplicateSourceKeyError):
        build_from_texts([("1_a.txt", ""), ("1_b.txt", "")], load_settings())


def test_missing_identity_stops_pipeline() -> None:
    with pytest.raises(NoIdentityBeforeDescError):
        build_glossary(chars_from_text("+group{text}"), load_settings())


def test_missing_name_stops_pipeline() -> None:
    with pytest.raises(NoNameError):
        build_glossary(chars_from_text("a +{text}"), load_settings())


def test_pipeline_logs_summary(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="glossc.pipeline")

    build_glossary(chars_from_text("a [A]"), load_settings())

    messages = [record.getMessage() for record in caplog.records if record.name == "glossc.pipeline"]
    assert any("rendered 1 items" in message for message in messages)


def test_deep_nesting_is_a_parse_error() -> None:
    with pytest.raises(NestingTooDeepError) as exc_info:
        build_from_texts([("1_deep.txt", "x [X] +{" + "{" * 3000 + "}\n")], load_settings())

    assert exc_info.value.stage == "parse"
    assert exc_info.value.opening.file == 1
