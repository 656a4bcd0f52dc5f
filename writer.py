from __future__ import annotations
from xml.sax.saxutils import escape
from style import serialize_styles

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

_ENTITIES = {'"': '&quot;'}


def encode_entities(text: str) -> str:
    # & < > are handled by escape() itself
    return escape(text, _ENTITIES)


class SVGWriter:
    """Accumulates markup for one or more nodes.

    A standalone writer starts its output with the XML declaration.
    """

    def __init__(self, standalone: bool = True):
        self.parts: list[str] = [XML_DECLARATION] if standalone else []

    def get_string(self) -> str:
        return ''.join(self.parts)

    def write_node(self, node) -> 'SVGWriter':
        self.parts.append('<' + node.tag)
        self._write_attributes(node.serializable_attributes())
        if node.styles:
            self._write_attribute('style', serialize_styles(node.styles))

        has_value = node.value is not None and node.value != ''
        if not node.children and not has_value:
            self.parts.append(' />')
            return self

        self.parts.append('>')
        if has_value:
            self._write_body(node)
        for child in node.children:
            self.write_node(child)
        self.parts.append('</' + node.tag + '>')
        return self

    def _write_body(self, node):
        if node.RAW_TEXT:
            self.parts.append('<![CDATA[' + node.value + ']]>')
        else:
            self.parts.append(encode_entities(node.value))

    def _write_attributes(self, attributes: dict[str, str]):
        for name, value in attributes.items():
            self._write_attribute(name, value)

    def _write_attribute(self, name: str, value: str):
        self.parts.append(f' {name}="{encode_entities(str(value))}"')
