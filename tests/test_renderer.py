"""Pixel-level tests for the numpy raster backend."""

from __future__ import annotations

import numpy as np
import pytest

from errors import BackendRenderFailure
from nodes import SVGCircle, SVGGroup, SVGLine, SVGPath, SVGPolygon, SVGPolyline, SVGRect
from rasterizer import rasterize
from renderer import Renderer
from transform import Transform

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)

NESTED_SQUARES = 'M0 0 H10 V10 H0 Z M3 3 H7 V7 H3 Z'


def pixel(renderer, x, y):
    return tuple(int(c) for c in renderer.buffer[y, x])


def covered(renderer):
    """Boolean map of pixels that are no longer background."""
    return np.any(renderer.get_rgb_buffer() != 255, axis=2)


def test_background():
    renderer = Renderer(4, 3, background_color=(10, 20, 30))
    assert renderer.buffer.shape == (3, 4, 4)
    assert pixel(renderer, 0, 0) == (10, 20, 30, 255)

    transparent = Renderer(2, 2, background_color=(0, 0, 0, 0))
    assert pixel(transparent, 1, 1) == (0, 0, 0, 0)


@pytest.mark.parametrize('size', [(0, 10), (10, 0), (-1, 5)])
def test_invalid_size(size):
    with pytest.raises(ValueError):
        Renderer(*size)


def test_unknown_kind_fails():
    with pytest.raises(BackendRenderFailure):
        Renderer(4, 4).render('spline', {}, SVGRect())


def test_rect_covers_pixel_centers():
    renderer = Renderer(10, 10)
    rasterize(SVGRect(2, 2, 4, 4).set_attribute('fill', 'red'), renderer)

    mask = covered(renderer)
    assert mask[2:6, 2:6].all()
    assert mask.sum() == 16
    assert pixel(renderer, 2, 2) == RED
    assert pixel(renderer, 6, 6) == WHITE


def test_default_fill_is_black():
    renderer = Renderer(10, 10)
    rasterize(SVGRect(0, 0, 3, 3), renderer)
    assert pixel(renderer, 1, 1) == BLACK


def test_no_paint():
    renderer = Renderer(10, 10)
    rect = SVGRect(0, 0, 10, 10)
    rect.set_style('fill', 'none')
    rasterize(rect, renderer)
    assert not covered(renderer).any()


def test_zero_sized_rect_is_skipped():
    renderer = Renderer(10, 10)
    rasterize(SVGRect(1, 1, 0, 5), renderer)
    assert not covered(renderer).any()


def test_rounded_rect_clips_corners():
    renderer = Renderer(10, 10)
    rect = SVGRect(0, 0, 10, 10)
    rect.set_attribute('rx', 4)
    rasterize(rect, renderer)
    assert pixel(renderer, 0, 0) == WHITE
    assert pixel(renderer, 5, 5) == BLACK
    assert pixel(renderer, 5, 0) == BLACK


@pytest.mark.parametrize('rule, center', [
    ('nonzero', BLACK),
    ('evenodd', WHITE),
])
def test_fill_rule(rule, center):
    renderer = Renderer(10, 10)
    path = SVGPath(NESTED_SQUARES)
    path.set_attribute('fill-rule', rule)
    rasterize(path, renderer)
    assert pixel(renderer, 5, 5) == center
    assert pixel(renderer, 1, 1) == BLACK


def test_unknown_fill_rule_fills_as_nonzero():
    renderer = Renderer(10, 10)
    path = SVGPath(NESTED_SQUARES)
    path.set_style('fill-rule', 'inherit-ish')
    rasterize(path, renderer)
    assert pixel(renderer, 5, 5) == BLACK


def test_polygon_fill_rule():
    # a self-overlapping pentagram leaves its center hole only under evenodd
    star = [[5, 0], [8, 10], [0, 3.5], [10, 3.5], [2, 10]]
    nonzero, evenodd = Renderer(10, 10), Renderer(10, 10)
    rasterize(SVGPolygon(star), nonzero)
    polygon = SVGPolygon(star)
    polygon.set_attribute('fill-rule', 'evenodd')
    rasterize(polygon, evenodd)
    assert pixel(nonzero, 5, 5) == BLACK
    assert pixel(evenodd, 5, 5) == WHITE


def test_polygon_needs_two_points():
    renderer = Renderer(10, 10)
    rasterize(SVGPolyline([[5, 5]]), renderer)
    assert not covered(renderer).any()


def test_circle():
    renderer = Renderer(10, 10)
    rasterize(SVGCircle(5, 5, 3), renderer)
    assert pixel(renderer, 5, 5) == BLACK
    assert pixel(renderer, 0, 0) == WHITE
    assert pixel(renderer, 9, 9) == WHITE


def test_line_stroke():
    renderer = Renderer(10, 10)
    line = SVGLine(0, 5, 10, 5)
    line.set_attribute('stroke', 'black').set_attribute('stroke-width', 2)
    rasterize(line, renderer)

    mask = covered(renderer)
    assert mask[4:6, :].all()
    assert not mask[:4, :].any()
    assert not mask[6:, :].any()


def test_line_without_stroke_draws_nothing():
    renderer = Renderer(10, 10)
    rasterize(SVGLine(0, 5, 10, 5), renderer)
    assert not covered(renderer).any()


def test_rect_stroke_leaves_interior():
    renderer = Renderer(10, 10)
    rect = SVGRect(2, 2, 6, 6)
    rect.set_attribute('fill', 'none').set_attribute('stroke', 'red').set_attribute('stroke-width', 2)
    rasterize(rect, renderer)
    assert pixel(renderer, 5, 5) == WHITE
    assert pixel(renderer, 2, 5) == RED
    assert pixel(renderer, 5, 1) == RED
    assert pixel(renderer, 0, 0) == WHITE


def test_group_transform_and_inherited_fill():
    renderer = Renderer(10, 10)
    group = SVGGroup()
    group.set_attribute('transform', 'translate(4, 4)').set_style('fill', 'red')
    group.add_child(SVGRect(0, 0, 2, 2))
    rasterize(group, renderer)

    mask = covered(renderer)
    assert mask[4:6, 4:6].all()
    assert mask.sum() == 4
    assert pixel(renderer, 4, 4) == RED


def test_base_transform():
    renderer = Renderer(10, 10, base_transform=Transform.scale(2))
    rasterize(SVGRect(1, 1, 2, 2), renderer)
    mask = covered(renderer)
    assert mask[2:6, 2:6].all()
    assert mask.sum() == 16


def test_hidden_group_is_not_drawn():
    renderer = Renderer(10, 10)
    group = SVGGroup()
    group.set_attribute('visibility', 'hidden')
    group.add_child(SVGRect(0, 0, 10, 10))
    rasterize(group, renderer)
    assert not covered(renderer).any()


def test_fill_opacity_blends_over_background():
    renderer = Renderer(10, 10)
    rect = SVGRect(0, 0, 10, 10)
    rect.set_attribute('fill', 'red').set_attribute('fill-opacity', '0.5')
    rasterize(rect, renderer)
    r, g, b, a = pixel(renderer, 3, 3)
    assert r == 255
    assert abs(g - 127) <= 1
    assert abs(b - 127) <= 1
    assert a == 255


def test_group_opacity_multiplies():
    renderer = Renderer(10, 10)
    group = SVGGroup()
    group.set_attribute('opacity', '0')
    group.add_child(SVGRect(0, 0, 10, 10))
    rasterize(group, renderer)
    assert not covered(renderer).any()


def test_to_image():
    renderer = Renderer(6, 4)
    rasterize(SVGRect(0, 0, 2, 2).set_attribute('fill', 'red'), renderer)
    image = renderer.to_image()
    assert image.size == (6, 4)
    assert image.mode == 'RGBA'
    assert image.getpixel((0, 0)) == RED
    assert image.getpixel((5, 3)) == WHITE
