# tests/controllers/test_process_controller.py
import logging
from unittest.mock import MagicMock

import pytest

import htmlrefine.controllers.process_controller as process_module
from htmlrefine.controllers.process_controller import ProcessController
from htmlrefine.errors import ParseError

SPEC_HTML = (
    '<h2 style="color:red">Product Specifications</h2>'
    '<ul class="MsoNormal"><li>Weight: 1.5 lbs</li><li>Battery: 12h</li></ul>'
)

CLEANED_HTML = (
    "<h2>Product Specifications</h2>"
    "<table><thead><tr><th>Specification</th><th>Value</th></tr></thead><tbody>"
    '<tr><td data-label="Specification">Weight</td><td data-label="Value">1.5 lbs</td></tr>'
    '<tr><td data-label="Specification">Battery</td><td data-label="Value">12h</td></tr>'
    "</tbody></table>"
)


@pytest.fixture
def controller():
    return ProcessController()


# --- Happy path ---

def test_sanitize_and_restructure(controller):
    """Attributen weg, specificatielijst wordt een tabel."""
    assert controller.sanitize_and_restructure(SPEC_HTML) == CLEANED_HTML


def test_stylize_cleaned_output(controller):
    output = controller.stylize(CLEANED_HTML)

    assert output.startswith('<h2 class="text-2xl font-semibold mb-3">Product Specifications</h2>')
    assert '<table class="specifications-table">' in output
    assert '<th class="border px-4 py-2 text-left font-semibold">Specification</th>' in output
    assert '<td class="border px-4 py-2" data-label="Value">12h</td>' in output


def test_convert_runs_both_passes(controller):
    result = controller.convert(SPEC_HTML)

    assert result.cleaned.output == CLEANED_HTML
    assert result.styled.output == controller.stylize(CLEANED_HTML)
    assert not result.cleaned.fail_closed
    assert not result.styled.fail_closed


def test_inspect(controller):
    assert controller.inspect("<p>Hallo</p>") == '<p attributes: []>\n  "Hallo"'


def test_clean_is_idempotent(controller):
    once = controller.sanitize_and_restructure(SPEC_HTML)
    assert controller.sanitize_and_restructure(once) == once


def test_full_document_yields_body_content(controller):
    html = "<!DOCTYPE html><html><head><title>x</title></head><body><p align='left'>Hi</p></body></html>"
    assert controller.sanitize_and_restructure(html) == "<p>Hi</p>"


def test_deeply_nested_input_does_not_fail_closed(controller):
    depth = 3000
    html = '<div style="x">' * depth + "<ul><li>A: 1</li></ul>" + "</div>" * depth

    result = controller.process("clean", html)

    assert not result.fail_closed
    assert "style=" not in result.output
    assert "<table>" in result.output


# --- Empty input ---

@pytest.mark.parametrize("raw", ["", "   \n\t", None])
def test_empty_input_short_circuits_without_parsing(raw):
    builder = MagicMock()
    controller = ProcessController(builder=builder)

    assert controller.sanitize_and_restructure(raw) == ""
    assert controller.stylize(raw) == ""
    assert controller.inspect(raw) == ""
    builder.parse.assert_not_called()


# --- Fail-closed ---

@pytest.mark.parametrize("operation, public", [
    ("clean", "sanitize_and_restructure"),
    ("style", "stylize"),
])
def test_parse_error_returns_input_unchanged(controller, monkeypatch, caplog, operation, public):
    """Zowel clean als style geven bij een parse-fout de invoer ongewijzigd terug."""
    def broken_parse(html):
        raise ParseError("engine gave up")

    monkeypatch.setattr(controller.builder, "parse", broken_parse)

    with caplog.at_level(logging.WARNING):
        result = controller.process(operation, SPEC_HTML)

    assert result.output == SPEC_HTML
    assert result.fail_closed is True
    assert result.error == "engine gave up"
    assert "Could not parse input" in caplog.text
    assert getattr(controller, public)(SPEC_HTML) == SPEC_HTML


def test_unexpected_error_returns_input_unchanged(controller, monkeypatch, caplog):
    """Een fout halverwege de pipeline lekt nooit naar de aanroeper."""
    def exploding(root):
        raise RuntimeError("boom")

    monkeypatch.setattr(controller.stylist, "apply_styles", exploding)

    with caplog.at_level(logging.ERROR):
        assert controller.stylize(CLEANED_HTML) == CLEANED_HTML

    assert "boom" in caplog.text


def test_empty_result_is_a_pipeline_defect(controller, monkeypatch, caplog):
    monkeypatch.setattr(controller.builder, "serialize", lambda node: "")

    with caplog.at_level(logging.ERROR):
        result = controller.process("clean", "<p>x</p>")

    assert result.output == "<p>x</p>"
    assert result.fail_closed is True
    assert "Pipeline defect" in caplog.text


@pytest.mark.parametrize("raw", [
    "<!DOCTYPE html><html><head><title>Leeg</title></head><body></body></html>",
    "<html><head><title>Leeg</title></head><body>\n  </body></html>",
    "<!-- alleen commentaar -->",
])
def test_empty_body_is_a_legitimate_empty_result(controller, raw, caplog):
    """Een lege <body> is geen pipeline-defect: de uitvoer is leeg, niet de invoer."""
    with caplog.at_level(logging.ERROR):
        cleaned = controller.process("clean", raw)
        styled = controller.process("style", raw)

    assert cleaned.output.strip() == ""
    assert styled.output.strip() == ""
    assert not cleaned.fail_closed
    assert not styled.fail_closed
    assert "Pipeline defect" not in caplog.text


def test_convert_styles_the_fail_closed_output(controller, monkeypatch):
    """Als de clean-stap faalt, wordt de originele invoer alsnog gestyled."""
    broken = MagicMock(side_effect=RuntimeError("classifier bug"))
    monkeypatch.setattr(controller.classifier, "restructure", broken)

    result = controller.convert("<p>x</p>")

    broken.assert_called_once()
    assert result.cleaned.fail_closed is True
    assert result.cleaned.output == "<p>x</p>"
    assert result.styled.output == '<p class="mb-4 leading-relaxed">x</p>'


def test_unknown_operation_raises(controller):
    with pytest.raises(ValueError):
        controller.process("shout", "<p>x</p>")


# --- Module-level helpers ---

def test_module_level_functions_use_default_controller():
    assert process_module.sanitize_and_restructure('<p style="a">x</p>') == "<p>x</p>"
    assert process_module.stylize("<p>x</p>") == '<p class="mb-4 leading-relaxed">x</p>'
    assert process_module.inspect("<p>x</p>") == '<p attributes: []>\n  "x"'
    assert process_module.convert('<em id="e">y</em>').styled.output == '<em class="italic">y</em>'
