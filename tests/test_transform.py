"""Tests for the affine transform value type."""

from __future__ import annotations

import pytest

from transform import Transform, TransformOp


def test_identity_maps_points_unchanged():
    assert Transform.identity().map(3.5, -2) == (3.5, -2)
    assert Transform.identity().is_identity()


def test_identity_is_neutral_for_compose():
    t = Transform(2, 0.5, -1, 3, 7, 9)
    assert Transform.identity().compose(t) == t
    assert t.compose(Transform.identity()) == t


def test_compose_is_associative():
    a = Transform.translate(10, 20)
    b = Transform.scale(3, 7)
    c = Transform.rotate(30)
    left = a.compose(b).compose(c)
    right = a.compose(b.compose(c))
    for got, expected in zip(left, right):
        assert got == pytest.approx(expected)


def test_compose_applies_right_operand_first():
    t = Transform.translate(10, 0).compose(Transform.scale(2))
    assert t.map(1, 1) == (12, 2)


def test_compose_does_not_mutate_operands():
    a = Transform.translate(1, 2)
    b = Transform.scale(5)
    a.compose(b)
    assert a == Transform(1, 0, 0, 1, 1, 2)
    assert b == Transform(5, 0, 0, 5, 0, 0)


def test_rotate_is_clockwise_on_screen():
    x, y = Transform.rotate(90).map(1, 0)
    assert (x, y) == pytest.approx((0, 1))


def test_rotate_around_center():
    x, y = Transform.rotate(180, 5, 5).map(0, 0)
    assert (x, y) == pytest.approx((10, 10))


def test_skew():
    assert Transform.skew_x(45).map(0, 2) == pytest.approx((2, 2))
    assert Transform.skew_y(45).map(2, 0) == pytest.approx((2, 2))


def test_inverse_round_trips_a_point():
    t = Transform(2, 1, -1, 3, 4, 5)
    x, y = t.inverse().map(*t.map(3, -4))
    assert (x, y) == pytest.approx((3, -4))


def test_singular_inverse_is_identity():
    assert Transform.scale(0).inverse() == Transform.identity()


def test_scale_factor():
    assert Transform.scale(2, 8).scale_factor() == pytest.approx(4)
    assert Transform.rotate(33).scale_factor() == pytest.approx(1)


class TestTransformOp:
    def test_missing_arguments_default_to_zero(self):
        assert TransformOp('translate', (10.0,)).to_matrix() == Transform.translate(10, 0)
        assert TransformOp('matrix', (1.0, 2.0)).to_matrix() == Transform(1, 2, 0, 0, 0, 0)

    def test_scale_second_argument_repeats_first(self):
        assert TransformOp('scale', (3.0,)).to_matrix() == Transform.scale(3, 3)

    def test_apply_right_multiplies(self):
        base = Transform.translate(5, 5)
        assert TransformOp('scale', (2.0,)).apply(base) == base.compose(Transform.scale(2))

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            TransformOp('spin', (1.0,)).to_matrix()
