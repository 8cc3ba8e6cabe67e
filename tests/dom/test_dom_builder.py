# tests/dom/test_dom_builder.py
import pytest
from bs4 import ParserRejectedMarkup

import htmlrefine.dom.builder as builder_module
from htmlrefine.dom.builder import DOMBuilder
from htmlrefine.dom.core import ElementNode, TextNode, iter_elements
from htmlrefine.errors import ParseError


@pytest.fixture
def builder():
    return DOMBuilder()


def test_parse_fragment_wraps_without_leaking(builder):
    """Een fragment wordt ingepakt, maar de wrapper komt nooit in de output."""
    doc = builder.parse("<p>Hallo</p><p>Wereld</p>")

    assert doc.is_fragment is True
    assert [child.tag for child in doc.root.children] == ["p", "p"]
    assert builder.serialize(doc) == "<p>Hallo</p><p>Wereld</p>"


def test_parse_full_document_returns_body_content(builder):
    """Een volledig document levert alleen de inhoud van <body> op."""
    html = "<!DOCTYPE html><html><head><title>T</title></head><body><p>Hi</p></body></html>"
    doc = builder.parse(html)

    assert doc.is_fragment is False
    assert doc.has_doctype is True
    assert doc.root_tag_valid is True
    assert builder.serialize(doc) == "<p>Hi</p>"


def test_full_document_detection_is_case_insensitive():
    assert DOMBuilder.is_full_document("  <!doctype HTML><html></html>")
    assert DOMBuilder.is_full_document("<HTML lang='en'><body></body></HTML>")
    assert not DOMBuilder.is_full_document("<p>html</p>")
    assert not DOMBuilder.is_full_document("<htmlish>")


def test_round_trip_preserves_structure(builder):
    """serialize(parse(x)) reproduceert tags, tekst en nesting."""
    html = '<ul><li>One</li><li>Two <em>2</em></li></ul><p>a &amp; b<br>c</p><img alt="x" src="y.png">'
    assert builder.serialize(builder.parse(html)) == html


def test_malformed_markup_is_repaired(builder):
    """Kapotte tags geven geen ParseError; de parser is tolerant."""
    output = builder.serialize(builder.parse("<p>Open <b>bold</p><div>rest"))

    assert "bold" in output
    assert "rest" in output


def test_comments_and_declarations_are_dropped(builder):
    doc = builder.parse("<p>x</p><!-- [if gte mso 9] -->")

    assert builder.serialize(doc) == "<p>x</p>"
    assert all(isinstance(node, (ElementNode, TextNode)) for node in doc.root.children)


def test_tags_and_attributes_are_normalized(builder):
    doc = builder.parse('<P CLASS="MsoNormal" Data-X="1">t</P>')
    paragraph = doc.root.children[0]

    assert paragraph.tag == "p"
    assert paragraph.attrs == {"class": "MsoNormal", "data-x": "1"}


def test_attribute_serialization_is_deterministic(builder):
    doc = builder.parse('<p title="t" data-x="1">x</p>')
    first = builder.serialize(doc)

    assert first == builder.serialize(doc)
    assert first == '<p data-x="1" title="t">x</p>'


def test_script_text_is_not_escaped(builder):
    html = "<script>if (a < b) { go(); }</script>"
    assert builder.serialize(builder.parse(html)) == html


def test_text_after_stray_closing_body_is_kept(builder):
    output = builder.serialize(builder.parse("<p>a</p></body><p>b</p>"))

    assert "<p>a</p>" in output
    assert "<p>b</p>" in output


@pytest.mark.parametrize("html, kept", [
    ('<p>Weight: 1.5 lbs</p><img src="x', "<p>Weight: 1.5 lbs</p>"),
    ("<p>a</p><img", "<p>a</p>"),
    ("<p>a</p><!-- unterminated", "<p>a</p>"),
    ("<![CDATA[", ""),
])
def test_truncated_fragment_never_leaks_wrapper(builder, html, kept):
    """Een afgebroken tag, attribuut of commentaar aan het eind lekt geen <body>."""
    output = builder.serialize(builder.parse(html))

    assert "body" not in output
    assert output.startswith(kept)


def test_serialize_single_nodes(builder):
    element = ElementNode(tag="p", attrs={"title": "x"}, children=[TextNode(data="1 < 2")])

    assert builder.serialize(element) == '<p title="x">1 &lt; 2</p>'
    assert builder.serialize(TextNode(data="a & b")) == "a &amp; b"


def test_parse_rejects_non_text(builder):
    with pytest.raises(ParseError):
        builder.parse(None)


def test_parse_error_when_engine_rejects_markup(builder, monkeypatch):
    """Als de engine geen boom kan maken, volgt een ParseError."""
    def rejecting_soup(*args, **kwargs):
        raise ParserRejectedMarkup("tokenizer gave up")

    monkeypatch.setattr(builder_module, "BeautifulSoup", rejecting_soup)

    with pytest.raises(ParseError):
        builder.parse("<p>x</p>")


def test_deeply_nested_input_round_trips(builder):
    """Diepe nesting mag geen RecursionError geven."""
    depth = 3000
    html = "<div>" * depth + "x" + "</div>" * depth
    doc = builder.parse(html)

    assert sum(1 for _ in iter_elements(doc.root, "div")) == depth
    assert builder.serialize(doc) == html
