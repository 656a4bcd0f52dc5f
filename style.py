from __future__ import annotations
import enum
from typing import Callable, Optional

StyleLookup = Callable[[str], Optional[str]]


class Visibility(enum.Enum):
    RENDER = 'render'
    SKIP = 'skip'


class FillRule(str, enum.Enum):
    NONZERO = 'nonzero'
    EVENODD = 'evenodd'


SVG_DEFAULTS = {
    'fill': 'black',
    'stroke': 'none',
    'stroke-width': '1',
    'stroke-linecap': 'butt',
    'stroke-linejoin': 'miter',
    'opacity': '1',
    'fill-opacity': '1',
    'stroke-opacity': '1',
    'fill-rule': 'nonzero',
    'visibility': 'visible',
    'display': 'inline',
    'color': 'black',
    'font-family': 'serif',
    'font-size': '16px',
    'text-anchor': 'start',
}

# display and opacity are not inherited, everything else here is
INHERITED_PROPERTIES = frozenset({
    'fill', 'stroke', 'stroke-width', 'stroke-linecap', 'stroke-linejoin',
    'stroke-miterlimit', 'stroke-dasharray', 'stroke-dashoffset',
    'fill-opacity', 'stroke-opacity', 'fill-rule', 'clip-rule',
    'font-family', 'font-size', 'font-weight', 'font-style',
    'text-anchor', 'color', 'visibility',
})

PRESENTATION_ATTRIBUTES = INHERITED_PROPERTIES | {
    'display', 'opacity', 'clip-path', 'mask', 'filter',
}


def resolve_visibility(lookup: StyleLookup) -> Visibility:
    if lookup('display') == 'none':
        return Visibility.SKIP

    visibility = (lookup('visibility') or '').strip().lower()
    if visibility in ('hidden', 'collapse'):
        return Visibility.SKIP

    return Visibility.RENDER


def resolve_fill_rule(lookup: StyleLookup) -> str:
    """Normalized fill-rule of a node.

    Unrecognized values are returned trimmed and lower-cased rather than
    rejected; backends decide what to do with them.
    """
    rule = (lookup('fill-rule') or '').strip().lower()
    if not rule:
        return FillRule.NONZERO.value
    if rule in (FillRule.NONZERO.value, FillRule.EVENODD.value):
        return FillRule(rule).value
    return rule


def get_style_with_default(lookup: StyleLookup, name: str) -> Optional[str]:
    value = lookup(name)
    if value is not None and value.strip():
        return value
    return SVG_DEFAULTS.get(name)


def parse_style_attribute(style_str: str) -> dict[str, str]:
    styles = {}
    if not style_str:
        return styles

    for declaration in style_str.split(';'):
        if ':' not in declaration:
            continue
        name, value = declaration.split(':', 1)
        name = name.strip()
        value = value.strip()
        if name and value:
            styles[name] = value

    return styles


def serialize_styles(styles: dict[str, str]) -> str:
    return '; '.join(f"{name}: {value}" for name, value in styles.items())
