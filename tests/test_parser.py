"""Tests for the markup parser."""

from __future__ import annotations

import pytest

from conftest import NESTED_SVG, SQUARE_SVG
from errors import SVGParseError
from nodes import SVGDocumentFragment, SVGGenericNode, SVGGroup, SVGPolyline, SVGRect, SVGStyle
from parser import get_tag, parse_attributes, parse_svg_string, tokenize
from writer import SVGWriter


def test_get_tag():
    assert get_tag('<rect x="1"/>') == 'rect'
    assert get_tag('</g>') == 'g'
    assert get_tag('<svg:path d=""/>') == 'svg:path'


def test_parse_attributes_with_both_quote_styles():
    assert parse_attributes('<rect x="1" y=\'2\' data-name = "a &amp; b"/>') == {
        'x': '1', 'y': '2', 'data-name': 'a & b',
    }
    assert parse_attributes('</rect>') == {}


def test_single_quoted_attributes_survive_parsing():
    root = parse_svg_string("<svg width='10' height='10'><rect width='4' height='4' fill='red'/></svg>")
    assert root.get_width() == '10'
    assert root.get_height() == '10'
    rect = root.get_child(0)
    assert rect.attributes == {'width': '4', 'height': '4', 'fill': 'red'}


def test_mixed_quotes_keep_the_other_quote_char():
    element = """<g id="it's" class='a "b"'>"""
    assert parse_attributes(element) == {'id': "it's", 'class': 'a "b"'}


def test_numeric_character_references_are_decoded():
    root = parse_svg_string('<svg><title>a&#38;b&#x3C;&apos;</title></svg>')
    assert root.get_child(0).get_value() == "a&b<'"
    assert parse_attributes('<g id="&#65;&#x42;"/>') == {'id': 'AB'}


def test_tokenize_keeps_cdata_intact():
    tokens = tokenize('<style><![CDATA[a > b]]></style>')
    assert tokens == ['<style>', '<![CDATA[a > b]]>', '</style>']


def test_parse_square():
    root = parse_svg_string(SQUARE_SVG)
    assert isinstance(root, SVGDocumentFragment)
    assert root.get_width() == '10'
    rect = root.get_child(0)
    assert isinstance(rect, SVGRect)
    assert rect.get_attribute('fill') == 'red'
    assert rect.parent is root


def test_parse_nested_document():
    root = parse_svg_string(NESTED_SVG)
    assert [child.tag for child in root.children] == ['title', 'style', 'g', 'defs']

    title, style, outer, defs = root.children
    assert title.get_value() == 'Nested & styled'
    assert isinstance(style, SVGStyle)
    assert style.get_css() == 'g > rect { fill: blue; }'

    assert isinstance(outer, SVGGroup)
    assert outer.get_attribute('transform') == 'translate(1, 1)'
    assert outer.get_style('fill') == '#00ff00'
    assert 'style' not in outer.attributes

    polyline = outer.get_child(0)
    assert isinstance(polyline, SVGPolyline)
    assert polyline.get_points() == [[0, 0], [4, 0], [4, 4]]
    assert polyline.get_computed_style('fill-rule') == 'evenodd'
    assert polyline.get_computed_style('fill') == '#00ff00'

    hidden = root.get_element_by_id('hidden')
    assert hidden.get_child(0).tag == 'rect'
    assert defs.get_child(0).get_attribute('id') == 'dot'


def test_unknown_elements_are_kept():
    root = parse_svg_string('<svg><foreignObject width="1"><p>x</p></foreignObject></svg>')
    node = root.get_child(0)
    assert isinstance(node, SVGGenericNode)
    assert node.get_child(0).get_value() == 'x'


def test_unclosed_elements_are_tolerated():
    root = parse_svg_string('<svg><g><rect/>')
    assert root.get_child(0).get_child(0).tag == 'rect'


def test_content_after_root_is_ignored():
    root = parse_svg_string('<svg><rect/></svg><rect/>')
    assert root.count_children() == 1


@pytest.mark.parametrize('markup', ['', 'just text', '<?xml version="1.0"?><!-- nothing -->'])
def test_missing_root(markup):
    with pytest.raises(SVGParseError):
        parse_svg_string(markup)


def test_wrong_root():
    with pytest.raises(SVGParseError):
        parse_svg_string('<g><rect/></g>')


def test_written_markup_parses_back():
    root = parse_svg_string(NESTED_SVG)
    markup = SVGWriter(False).write_node(root).get_string()
    again = parse_svg_string(markup)
    assert SVGWriter(False).write_node(again).get_string() == markup
