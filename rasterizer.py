from __future__ import annotations
from typing import Any, Callable, NamedTuple, Optional, Protocol
from path_data import parse_path_data
from style import Visibility, resolve_fill_rule, resolve_visibility
from transform import Transform
from transform_parser import parse_transform_string

# containers whose content is referenced from elsewhere, never drawn in place
NON_RENDERING_TAGS = frozenset({
    'defs', 'style', 'title', 'desc', 'metadata', 'clipPath', 'mask',
    'marker', 'pattern', 'symbol', 'linearGradient', 'radialGradient',
})


class RenderBackend(Protocol):
    def render(self, kind: str, options: dict[str, Any], node: Any) -> None:
        ...


class ShapeDescriptor(NamedTuple):
    """One drawable primitive: shape kind, normalized options, originating node.

    Geometry in `options` is untransformed; the node reference is only there
    so a backend can look up paint and transforms.
    """
    kind: str
    options: dict
    node: Any


def _describe_polygonal(node, open_shape: bool) -> ShapeDescriptor:
    return ShapeDescriptor('polygon', {
        'open': open_shape,
        'points': [list(point) for point in node.get_points()],
        'fill-rule': resolve_fill_rule(node.get_computed_style),
    }, node)


def _describe_path(node) -> ShapeDescriptor:
    subpaths = [{'points': [list(p) for p in subpath.points], 'open': not subpath.closed}
                for subpath in parse_path_data(node.get_attribute('d', ''))]
    return ShapeDescriptor('path', {
        'subpaths': subpaths,
        'fill-rule': resolve_fill_rule(node.get_computed_style),
    }, node)


SHAPE_BUILDERS: dict[str, Callable[[Any], ShapeDescriptor]] = {
    'polyline': lambda node: _describe_polygonal(node, True),
    'polygon': lambda node: _describe_polygonal(node, False),
    'rect': lambda node: ShapeDescriptor('rect', node.get_geometry(), node),
    'circle': lambda node: ShapeDescriptor('ellipse', node.get_geometry(), node),
    'ellipse': lambda node: ShapeDescriptor('ellipse', node.get_geometry(), node),
    'line': lambda node: ShapeDescriptor('line', node.get_geometry(), node),
    'path': _describe_path,
}


def describe(node) -> Optional[ShapeDescriptor]:
    builder = SHAPE_BUILDERS.get(node.tag)
    if builder is None:
        return None
    return builder(node)


def rasterize(node, backend: RenderBackend) -> None:
    """Draw `node` and its subtree onto `backend` in document order.

    Hidden nodes are skipped together with their whole subtree. Errors raised
    by the backend propagate and end the pass.
    """
    if resolve_visibility(node.get_computed_style) is Visibility.SKIP:
        return
    if node.tag in NON_RENDERING_TAGS:
        return

    descriptor = describe(node)
    if descriptor is not None:
        backend.render(descriptor.kind, descriptor.options, descriptor.node)

    for child in list(node.children):
        rasterize(child, backend)


def effective_transform(node, base: Transform = None) -> Transform:
    ancestry = []
    while node is not None:
        ancestry.append(node)
        node = node.parent

    result = base if base is not None else Transform.identity()
    for ancestor in reversed(ancestry):
        result = parse_transform_string(ancestor.get_attribute('transform'), result)
    return result
