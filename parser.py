from __future__ import annotations
import html
import logging
import re
from errors import SVGParseError
from nodes import NODE_CLASSES, SVGDocumentFragment, SVGNode, create_node
from style import parse_style_attribute

logger = logging.getLogger(__name__)

token_pattern = re.compile(
    r'(<!\[CDATA\[.*?\]\]>|<!--.*?-->|<\?.*?\?>|<![^>]*>|<[^>]*>)',
    flags=re.DOTALL
)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:.-]+)')
attribute_pattern = re.compile(r'([\w:.-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')', flags=re.DOTALL)


def is_self_terminating(svg_value: str) -> bool:
    return svg_value.rstrip().endswith('/>')


def is_terminator(svg_value: str) -> bool:
    return svg_value.strip().startswith('</')


def get_tag(svg_value: str) -> str:
    match = first_word_pattern.search(svg_value.strip().lstrip('<'))
    if match:
        return match.group(1)
    return ""


def decode_entities(text: str) -> str:
    return html.unescape(text)


def parse_attributes(element: str) -> dict[str, str]:
    content = element.strip()
    if content.startswith('</'):
        return {}

    tag = get_tag(content)
    body = content[content.find(tag) + len(tag):] if tag else content
    return {match.group(1): decode_entities(match.group(2) if match.group(2) is not None else match.group(3))
            for match in attribute_pattern.finditer(body)}


def tokenize(data: str) -> list[str]:
    return [part for part in token_pattern.split(data) if part]


def build_node(element: str) -> SVGNode:
    tag = get_tag(element)
    if tag not in NODE_CLASSES:
        logger.debug("Unknown element <%s>, keeping it as a generic node", tag)

    node = create_node(tag)
    for name, value in parse_attributes(element).items():
        if name == 'style':
            for style_name, style_value in parse_style_attribute(value).items():
                node.set_style(style_name, style_value)
        else:
            node.set_attribute(name, value)
    return node


def _append_text(node: SVGNode, text: str):
    node.value = text if node.value is None else node.value + text


def parse_svg_string(data: str) -> SVGDocumentFragment:
    """Build a node tree from SVG markup.

    Comments, declarations and processing instructions are dropped. Text and
    CDATA sections become the value of the element that contains them.
    Unclosed elements are closed implicitly at the end of input.
    """
    root = None
    current = None

    for entry in tokenize(data):
        if entry.startswith('<![CDATA['):
            if current is not None:
                _append_text(current, entry[9:-3])
            continue

        if entry.startswith('<!') or entry.startswith('<?'):
            continue

        if not entry.startswith('<'):
            if current is not None and entry.strip():
                _append_text(current, decode_entities(entry))
            continue

        if is_terminator(entry):
            tag = get_tag(entry)
            node = current
            while node is not None and node.tag != tag:
                node = node.parent
            if node is None:
                logger.debug("Ignoring stray closing tag </%s>", tag)
            else:
                current = node.parent
            if current is None and root is not None:
                break
            continue

        node = build_node(entry)
        if root is None:
            if node.tag != 'svg':
                raise SVGParseError(f"Expected <svg> root element, found <{node.tag}>")
            root = node
        elif current is None:
            break
        else:
            current.add_child(node)

        if not is_self_terminating(entry):
            current = node

    if root is None:
        raise SVGParseError("No root <svg> element found")
    return root
