from __future__ import annotations
import math
from typing import NamedTuple


class Transform(NamedTuple):
    """2D affine matrix [a c e; b d f; 0 0 1].

    Instances are immutable; every operation returns a new Transform.
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @staticmethod
    def identity() -> 'Transform':
        return Transform(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @staticmethod
    def translate(tx: float, ty: float = 0.0) -> 'Transform':
        return Transform(1.0, 0.0, 0.0, 1.0, float(tx), float(ty))

    @staticmethod
    def scale(sx: float, sy: float = None) -> 'Transform':
        if sy is None:
            sy = sx
        return Transform(float(sx), 0.0, 0.0, float(sy), 0.0, 0.0)

    @staticmethod
    def rotate(angle_degrees: float, cx: float = 0.0, cy: float = 0.0) -> 'Transform':
        angle_rad = math.radians(angle_degrees)
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        r = Transform(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)

        if cx != 0.0 or cy != 0.0:
            return Transform.translate(cx, cy).compose(r).compose(Transform.translate(-cx, -cy))
        return r

    @staticmethod
    def skew_x(angle_degrees: float) -> 'Transform':
        return Transform(1.0, 0.0, math.tan(math.radians(angle_degrees)), 1.0, 0.0, 0.0)

    @staticmethod
    def skew_y(angle_degrees: float) -> 'Transform':
        return Transform(1.0, math.tan(math.radians(angle_degrees)), 0.0, 1.0, 0.0, 0.0)

    def compose(self, other: 'Transform') -> 'Transform':
        # self ∘ other: other is applied to a point first
        return Transform(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.e + self.c * other.f + self.e,
            self.b * other.e + self.d * other.f + self.f
        )

    def map(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e,
                self.b * x + self.d * y + self.f)

    def map_points(self, points) -> list[tuple[float, float]]:
        return [self.map(x, y) for x, y in points]

    def is_identity(self) -> bool:
        return (abs(self.a - 1.0) < 1e-9 and abs(self.b) < 1e-9 and
                abs(self.c) < 1e-9 and abs(self.d - 1.0) < 1e-9 and
                abs(self.e) < 1e-9 and abs(self.f) < 1e-9)

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def scale_factor(self) -> float:
        return math.sqrt(abs(self.determinant()))

    def inverse(self) -> 'Transform':
        det = self.determinant()
        if abs(det) < 1e-12:
            return Transform.identity()

        inv_det = 1.0 / det
        return Transform(
            self.d * inv_det,
            -self.b * inv_det,
            -self.c * inv_det,
            self.a * inv_det,
            (self.c * self.f - self.d * self.e) * inv_det,
            (self.b * self.e - self.a * self.f) * inv_det
        )


TRANSFORM_FUNCTIONS = ('translate', 'scale', 'rotate', 'skewX', 'skewY', 'matrix')


class TransformOp(NamedTuple):
    """One parsed `name(args...)` entry of a transform list.

    Omitted arguments default to 0, except the second argument of scale,
    which repeats the first.
    """
    name: str
    args: tuple = ()

    def _arg(self, index: int, default: float = 0.0) -> float:
        return self.args[index] if index < len(self.args) else default

    def to_matrix(self) -> Transform:
        name = self.name
        if name == 'translate':
            return Transform.translate(self._arg(0), self._arg(1))
        if name == 'scale':
            sx = self._arg(0)
            return Transform.scale(sx, self._arg(1, sx))
        if name == 'rotate':
            return Transform.rotate(self._arg(0), self._arg(1), self._arg(2))
        if name == 'skewX':
            return Transform.skew_x(self._arg(0))
        if name == 'skewY':
            return Transform.skew_y(self._arg(0))
        if name == 'matrix':
            return Transform(*(float(self._arg(i)) for i in range(6)))
        raise ValueError(f"not a transform function: {name!r}")

    def apply(self, base: Transform) -> Transform:
        return base.compose(self.to_matrix())
