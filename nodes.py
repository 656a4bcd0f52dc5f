from __future__ import annotations
from typing import Iterator, Optional
from geometry import parse_length, parse_points, serialize_points
from rasterizer import rasterize
from style import INHERITED_PROPERTIES, PRESENTATION_ATTRIBUTES
from transform import Transform
from transform_parser import parse_transform_string


class SVGNode:
    """A node of an SVG document tree.

    Attributes and styles keep insertion order, which is also the order the
    writer emits them in.
    """
    TAG = None
    RAW_TEXT = False

    def __init__(self, tag: str = None):
        self.tag = tag or self.TAG
        self.attributes: dict[str, str] = {}
        self.styles: dict[str, str] = {}
        self.children: list[SVGNode] = []
        self.parent: Optional[SVGNode] = None
        self.value: Optional[str] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.tag!r} children={len(self.children)}>"

    def get_attribute(self, name: str, default: str = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value) -> 'SVGNode':
        if value is None:
            self.attributes.pop(name, None)
        else:
            self.attributes[name] = str(value)
        return self

    def remove_attribute(self, name: str) -> 'SVGNode':
        self.attributes.pop(name, None)
        return self

    def serializable_attributes(self) -> dict[str, str]:
        return dict(self.attributes)

    def get_style(self, name: str) -> Optional[str]:
        return self.styles.get(name)

    def set_style(self, name: str, value) -> 'SVGNode':
        if value is None or value == '':
            self.styles.pop(name, None)
        else:
            self.styles[name] = str(value)
        return self

    def remove_style(self, name: str) -> 'SVGNode':
        self.styles.pop(name, None)
        return self

    def get_computed_style(self, name: str) -> Optional[str]:
        value = self.styles.get(name)
        if value is not None:
            return value

        if name in PRESENTATION_ATTRIBUTES:
            value = self.attributes.get(name)
            if value is not None:
                return value

        if name in INHERITED_PROPERTIES and self.parent is not None:
            return self.parent.get_computed_style(name)
        return None

    def get_value(self) -> Optional[str]:
        return self.value

    def set_value(self, value) -> 'SVGNode':
        self.value = None if value is None else str(value)
        return self

    def add_child(self, node: 'SVGNode', index: int = None) -> 'SVGNode':
        if node is self or node.parent is self:
            return self
        if node.parent is not None:
            node.parent.remove_child(node)

        node.parent = self
        if index is None:
            self.children.append(node)
        else:
            self.children.insert(index, node)
        return self

    def remove_child(self, child) -> 'SVGNode':
        if isinstance(child, int):
            if not 0 <= child < len(self.children):
                return self
            child = self.children[child]
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def count_children(self) -> int:
        return len(self.children)

    def get_child(self, index: int) -> 'SVGNode':
        return self.children[index]

    def iter_descendants(self) -> Iterator['SVGNode']:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def get_elements_by_tag_name(self, tag: str) -> list['SVGNode']:
        return [n for n in self.iter_descendants() if tag == '*' or n.tag == tag]

    def get_element_by_id(self, node_id: str) -> Optional['SVGNode']:
        for node in self.iter_descendants():
            if node.attributes.get('id') == node_id:
                return node
        return None

    def get_transform(self) -> Transform:
        return parse_transform_string(self.attributes.get('transform'))

    def rasterize(self, backend) -> None:
        rasterize(self, backend)


class SVGGenericNode(SVGNode):
    pass


class SVGDocumentFragment(SVGNode):
    TAG = 'svg'

    def __init__(self, width=None, height=None):
        super().__init__()
        self.set_attribute('width', width)
        self.set_attribute('height', height)

    def is_root(self) -> bool:
        return self.parent is None

    def get_width(self) -> Optional[str]:
        return self.get_attribute('width')

    def get_height(self) -> Optional[str]:
        return self.get_attribute('height')

    def serializable_attributes(self) -> dict[str, str]:
        attrs = dict(self.attributes)
        if self.is_root():
            attrs.setdefault('xmlns', 'http://www.w3.org/2000/svg')
        return attrs


class SVGGroup(SVGNode):
    TAG = 'g'


class SVGDefs(SVGNode):
    TAG = 'defs'


class SVGRect(SVGNode):
    TAG = 'rect'

    def __init__(self, x=None, y=None, width=None, height=None):
        super().__init__()
        self.set_attribute('x', x)
        self.set_attribute('y', y)
        self.set_attribute('width', width)
        self.set_attribute('height', height)

    def get_geometry(self) -> dict[str, float]:
        width = parse_length(self.get_attribute('width'))
        height = parse_length(self.get_attribute('height'))
        rx_raw = self.get_attribute('rx')
        ry_raw = self.get_attribute('ry')
        rx = parse_length(rx_raw)
        ry = parse_length(ry_raw)
        if rx_raw is None:
            rx = ry
        if ry_raw is None:
            ry = rx

        return {
            'x': parse_length(self.get_attribute('x')),
            'y': parse_length(self.get_attribute('y')),
            'width': width,
            'height': height,
            'rx': min(max(rx, 0.0), width / 2.0),
            'ry': min(max(ry, 0.0), height / 2.0),
        }


class SVGCircle(SVGNode):
    TAG = 'circle'

    def __init__(self, cx=None, cy=None, r=None):
        super().__init__()
        self.set_attribute('cx', cx)
        self.set_attribute('cy', cy)
        self.set_attribute('r', r)

    def get_geometry(self) -> dict[str, float]:
        r = parse_length(self.get_attribute('r'))
        return {
            'cx': parse_length(self.get_attribute('cx')),
            'cy': parse_length(self.get_attribute('cy')),
            'rx': r,
            'ry': r,
        }


class SVGEllipse(SVGNode):
    TAG = 'ellipse'

    def __init__(self, cx=None, cy=None, rx=None, ry=None):
        super().__init__()
        self.set_attribute('cx', cx)
        self.set_attribute('cy', cy)
        self.set_attribute('rx', rx)
        self.set_attribute('ry', ry)

    def get_geometry(self) -> dict[str, float]:
        return {
            'cx': parse_length(self.get_attribute('cx')),
            'cy': parse_length(self.get_attribute('cy')),
            'rx': parse_length(self.get_attribute('rx')),
            'ry': parse_length(self.get_attribute('ry')),
        }


class SVGLine(SVGNode):
    TAG = 'line'

    def __init__(self, x1=None, y1=None, x2=None, y2=None):
        super().__init__()
        self.set_attribute('x1', x1)
        self.set_attribute('y1', y1)
        self.set_attribute('x2', x2)
        self.set_attribute('y2', y2)

    def get_geometry(self) -> dict[str, float]:
        return {name: parse_length(self.get_attribute(name)) for name in ('x1', 'y1', 'x2', 'y2')}


class SVGPolygonalShape(SVGNode):
    """Base for polyline and polygon; points live outside the attribute dict."""

    def __init__(self, points=None):
        super().__init__()
        self.points: list[list[float]] = [[float(x), float(y)] for x, y in (points or [])]

    def get_points(self) -> list[list[float]]:
        return self.points

    def add_point(self, x, y=None) -> 'SVGPolygonalShape':
        if y is None:
            x, y = x
        self.points.append([float(x), float(y)])
        return self

    def set_point(self, index: int, x, y=None) -> 'SVGPolygonalShape':
        if y is None:
            x, y = x
        self.points[index] = [float(x), float(y)]
        return self

    def remove_point(self, index: int) -> 'SVGPolygonalShape':
        del self.points[index]
        return self

    def count_points(self) -> int:
        return len(self.points)

    def set_attribute(self, name: str, value) -> 'SVGNode':
        if name == 'points':
            self.points = parse_points(value) if value is not None else []
            return self
        return super().set_attribute(name, value)

    def get_attribute(self, name: str, default: str = None) -> Optional[str]:
        if name == 'points':
            return serialize_points(self.points)
        return super().get_attribute(name, default)

    def serializable_attributes(self) -> dict[str, str]:
        attrs = {'points': serialize_points(self.points)}
        attrs.update(self.attributes)
        return attrs


class SVGPolyline(SVGPolygonalShape):
    TAG = 'polyline'


class SVGPolygon(SVGPolygonalShape):
    TAG = 'polygon'


class SVGPath(SVGNode):
    TAG = 'path'

    def __init__(self, d: str = None):
        super().__init__()
        self.set_attribute('d', d)

    def get_description(self) -> str:
        return self.get_attribute('d', '')


class SVGText(SVGNode):
    TAG = 'text'

    def __init__(self, text: str = None, x=0, y=0):
        super().__init__()
        self.set_attribute('x', x)
        self.set_attribute('y', y)
        self.set_value(text)


class SVGTitle(SVGNode):
    TAG = 'title'

    def __init__(self, text: str = None):
        super().__init__()
        self.set_value(text)


class SVGStyle(SVGNode):
    TAG = 'style'
    RAW_TEXT = True

    def __init__(self, css: str = '', css_type: str = 'text/css'):
        super().__init__()
        self.set_attribute('type', css_type)
        self.set_value(css)

    def get_css(self) -> str:
        return self.value or ''


NODE_CLASSES = {
    cls.TAG: cls for cls in (
        SVGDocumentFragment, SVGGroup, SVGDefs, SVGRect, SVGCircle, SVGEllipse,
        SVGLine, SVGPolyline, SVGPolygon, SVGPath, SVGText, SVGTitle, SVGStyle,
    )
}


def create_node(tag: str) -> SVGNode:
    cls = NODE_CLASSES.get(tag)
    if cls is None:
        return SVGGenericNode(tag)

    node = cls()
    # constructor defaults (e.g. text x/y) are replaced by parsed attributes
    if tag != 'style':
        node.attributes.clear()
    node.value = None
    return node
