from __future__ import annotations
from colors import get_color_with_opacity, parse_color
from geometry import clamp, parse_length
from style import get_style_with_default


def _parse_opacity(value: str) -> float:
    if not value:
        return 1.0
    value = value.strip()
    try:
        if value.endswith('%'):
            return clamp(float(value[:-1]) / 100.0, 0.0, 1.0)
        return clamp(float(value), 0.0, 1.0)
    except ValueError:
        return 1.0


def _group_opacity(node) -> float:
    # opacity is not inherited but multiplies down the tree
    opacity = 1.0
    while node is not None:
        opacity *= _parse_opacity(node.get_computed_style('opacity'))
        node = node.parent
    return opacity


class DrawingContext:
    """Paint state a backend needs to draw a single node."""

    def __init__(self, fill_color=(0, 0, 0, 255), stroke_color=(0, 0, 0, 0), stroke_width: float = 1.0):
        self.fill_color = fill_color
        self.stroke_color = stroke_color
        self.stroke_width = stroke_width

    def __repr__(self) -> str:
        return (f"DrawingContext(fill={self.fill_color}, stroke={self.stroke_color}, "
                f"stroke_width={self.stroke_width})")

    @staticmethod
    def from_node(node) -> 'DrawingContext':
        lookup = node.get_computed_style
        current_color = get_style_with_default(lookup, 'color')
        opacity = _group_opacity(node)

        fill = parse_color(get_style_with_default(lookup, 'fill'), current_color)
        fill_opacity = _parse_opacity(lookup('fill-opacity'))

        stroke = parse_color(get_style_with_default(lookup, 'stroke'), current_color)
        stroke_opacity = _parse_opacity(lookup('stroke-opacity'))

        stroke_width = parse_length(get_style_with_default(lookup, 'stroke-width'), default=1.0)

        return DrawingContext(
            fill_color=get_color_with_opacity(fill, opacity * fill_opacity),
            stroke_color=get_color_with_opacity(stroke, opacity * stroke_opacity),
            stroke_width=max(0.0, stroke_width),
        )

    def has_fill(self) -> bool:
        return self.fill_color[3] > 0

    def has_stroke(self) -> bool:
        return self.stroke_color[3] > 0 and self.stroke_width > 0
