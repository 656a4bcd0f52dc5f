from __future__ import annotations
import logging
import math
from typing import List, Optional, Sequence, Tuple
import numpy as np
from PIL import Image
from colors import blend_into
from drawing_context import DrawingContext
from errors import BackendRenderFailure
from rasterizer import effective_transform
from style import FillRule, get_style_with_default
from transform import Transform

logger = logging.getLogger(__name__)

Bounds = Tuple[int, int, int, int]


class Renderer:
    """Raster backend drawing shape descriptors into an RGBA numpy buffer.

    Points are mapped through `base_transform` followed by the node's
    effective transform. No antialiasing: a pixel is covered when its center
    is inside the shape.
    """

    def __init__(self, width: int, height: int,
                 background_color: Sequence[int] = (255, 255, 255),
                 base_transform: Optional[Transform] = None):
        if width <= 0 or height <= 0:
            raise ValueError(f"Raster size must be positive, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.base_transform = base_transform if base_transform is not None else Transform.identity()

        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self.buffer[:, :, 0] = background_color[0]
        self.buffer[:, :, 1] = background_color[1]
        self.buffer[:, :, 2] = background_color[2]
        self.buffer[:, :, 3] = background_color[3] if len(background_color) > 3 else 255

        self._handlers = {
            'polygon': self._render_polygon,
            'rect': self._render_rect,
            'ellipse': self._render_ellipse,
            'line': self._render_line,
            'path': self._render_path,
        }

    def render(self, kind: str, options: dict, node) -> None:
        handler = self._handlers.get(kind)
        if handler is None:
            raise BackendRenderFailure(f"Unsupported shape kind: {kind!r}")

        transform = effective_transform(node, self.base_transform)
        ctx = DrawingContext.from_node(node)
        handler(options, transform, ctx, node)

    def _render_polygon(self, options: dict, transform: Transform, ctx: DrawingContext, node):
        points = options.get('points') or []
        if len(points) < 2:
            logger.debug("Skipping %s with %d point(s)", node.tag, len(points))
            return

        ring = transform.map_points(points)
        self._paint([(ring, bool(options.get('open')))], options.get('fill-rule'), transform, ctx, node)

    def _render_rect(self, options: dict, transform: Transform, ctx: DrawingContext, node):
        x, y = options['x'], options['y']
        width, height = options['width'], options['height']
        if width <= 0 or height <= 0:
            logger.debug("Skipping rect with size %sx%s", width, height)
            return

        rx, ry = options.get('rx', 0.0), options.get('ry', 0.0)
        if rx <= 0 or ry <= 0:
            points = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        else:
            points = []
            corners = (
                (x + width - rx, y + ry, -90.0),
                (x + width - rx, y + height - ry, 0.0),
                (x + rx, y + height - ry, 90.0),
                (x + rx, y + ry, 180.0),
            )
            steps = self._arc_steps(max(rx, ry) * transform.scale_factor(), 90.0)
            for cx, cy, start in corners:
                for i in range(steps + 1):
                    theta = math.radians(start + 90.0 * i / steps)
                    points.append((cx + rx * math.cos(theta), cy + ry * math.sin(theta)))

        self._paint([(transform.map_points(points), False)], FillRule.NONZERO.value, transform, ctx, node)

    def _render_ellipse(self, options: dict, transform: Transform, ctx: DrawingContext, node):
        cx, cy = options['cx'], options['cy']
        rx, ry = options['rx'], options['ry']
        if rx <= 0 or ry <= 0:
            logger.debug("Skipping %s with radii %s,%s", node.tag, rx, ry)
            return

        steps = self._arc_steps(max(rx, ry) * transform.scale_factor(), 360.0)
        points = [(cx + rx * math.cos(2 * math.pi * i / steps), cy + ry * math.sin(2 * math.pi * i / steps))
                  for i in range(steps)]
        self._paint([(transform.map_points(points), False)], FillRule.NONZERO.value, transform, ctx, node)

    def _render_line(self, options: dict, transform: Transform, ctx: DrawingContext, node):
        ring = transform.map_points([(options['x1'], options['y1']), (options['x2'], options['y2'])])
        if ctx.has_stroke():
            self._stroke([(ring, True)], transform, ctx, node)

    def _render_path(self, options: dict, transform: Transform, ctx: DrawingContext, node):
        rings = [(transform.map_points(subpath['points']), bool(subpath.get('open')))
                 for subpath in options.get('subpaths') or [] if len(subpath['points']) > 1]
        if rings:
            self._paint(rings, options.get('fill-rule'), transform, ctx, node)

    def _arc_steps(self, radius_px: float, degrees: float) -> int:
        return int(max(4, min(360, math.ceil(radius_px * math.radians(degrees) / 2.0))))

    def _paint(self, rings: List[tuple], fill_rule: str, transform: Transform, ctx: DrawingContext, node):
        if ctx.has_fill():
            fill_points = [ring for ring, _ in rings if len(ring) > 2]
            if fill_points:
                self._fill(fill_points, fill_rule, ctx.fill_color)

        if ctx.has_stroke():
            self._stroke(rings, transform, ctx, node)

    def _bounds(self, rings: List[Sequence[Tuple[float, float]]]) -> Optional[Bounds]:
        xs = [p[0] for ring in rings for p in ring]
        ys = [p[1] for ring in rings for p in ring]
        x0 = max(0, int(math.floor(min(xs))))
        y0 = max(0, int(math.floor(min(ys))))
        x1 = min(self.width, int(math.ceil(max(xs))) + 1)
        y1 = min(self.height, int(math.ceil(max(ys))) + 1)
        if x0 >= x1 or y0 >= y1:
            return None
        return (x0, y0, x1, y1)

    def _coverage(self, rings: List[Sequence[Tuple[float, float]]], fill_rule: str, bounds: Bounds) -> np.ndarray:
        x0, y0, x1, y1 = bounds
        px = np.arange(x0, x1, dtype=np.float64)[None, :] + 0.5
        py = np.arange(y0, y1, dtype=np.float64)[:, None] + 0.5

        winding = np.zeros((y1 - y0, x1 - x0), dtype=np.int32)
        crossings = np.zeros_like(winding)

        for ring in rings:
            count = len(ring)
            for i in range(count):
                ax, ay = ring[i]
                bx, by = ring[(i + 1) % count]
                if ay == by:
                    continue

                rows = (ay <= py) != (by <= py)
                x_cross = ax + (py - ay) * (bx - ax) / (by - ay)
                hit = rows & (px < x_cross)
                winding += np.where(hit, 1 if by > ay else -1, 0).astype(np.int32)
                crossings += hit

        if fill_rule == FillRule.EVENODD.value:
            return (crossings % 2) == 1
        return winding != 0

    def _fill(self, rings, fill_rule: str, color):
        if fill_rule not in (FillRule.NONZERO.value, FillRule.EVENODD.value):
            logger.debug("Unsupported fill-rule %r, filling as nonzero", fill_rule)
            fill_rule = FillRule.NONZERO.value

        bounds = self._bounds(rings)
        if bounds is None:
            return

        x0, y0, x1, y1 = bounds
        mask = self._coverage(rings, fill_rule, bounds)
        blend_into(self.buffer[y0:y1, x0:x1], mask, color)

    def _stroke(self, rings, transform: Transform, ctx: DrawingContext, node):
        half = ctx.stroke_width * transform.scale_factor() / 2.0
        if half <= 0:
            return

        lookup = node.get_computed_style
        linecap = (get_style_with_default(lookup, 'stroke-linecap') or 'butt').strip().lower()
        linejoin = (get_style_with_default(lookup, 'stroke-linejoin') or 'miter').strip().lower()

        pieces = []
        for ring, is_open in rings:
            pieces.extend(self._stroke_outline(ring, is_open, half, linecap, linejoin))

        bounds = self._bounds(pieces) if pieces else None
        if bounds is None:
            return

        x0, y0, x1, y1 = bounds
        mask = np.zeros((y1 - y0, x1 - x0), dtype=bool)
        for piece in pieces:
            mask |= self._coverage([piece], FillRule.NONZERO.value, bounds)
        blend_into(self.buffer[y0:y1, x0:x1], mask, ctx.stroke_color)

    def _stroke_outline(self, ring, is_open: bool, half: float, linecap: str, linejoin: str) -> list:
        points = [p for i, p in enumerate(ring) if i == 0 or p != ring[i - 1]]
        if not is_open and len(points) > 1 and points[0] == points[-1]:
            points.pop()
        if len(points) < 2:
            if linecap in ('round', 'square') and points:
                return [self._dot(points[0], half, linecap)]
            return []

        segments = list(zip(points, points[1:]))
        if not is_open:
            segments.append((points[-1], points[0]))

        pieces = []
        normals = []
        last = len(segments) - 1
        for index, ((ax, ay), (bx, by)) in enumerate(segments):
            length = math.hypot(bx - ax, by - ay)
            ux, uy = (bx - ax) / length, (by - ay) / length
            nx, ny = -uy * half, ux * half
            if is_open and linecap == 'square':
                if index == 0:
                    ax, ay = ax - ux * half, ay - uy * half
                if index == last:
                    bx, by = bx + ux * half, by + uy * half
            pieces.append([(ax + nx, ay + ny), (bx + nx, by + ny), (bx - nx, by - ny), (ax - nx, ay - ny)])
            normals.append((nx, ny))

        joints = range(1, len(segments)) if is_open else range(len(segments))
        for i in joints:
            vertex = segments[i][0]
            if linejoin == 'round':
                pieces.append(self._circle(vertex, half))
            else:
                (n1x, n1y), (n2x, n2y) = normals[i - 1], normals[i]
                vx, vy = vertex
                pieces.append([(vx, vy), (vx + n1x, vy + n1y), (vx + n2x, vy + n2y)])
                pieces.append([(vx, vy), (vx - n1x, vy - n1y), (vx - n2x, vy - n2y)])

        if is_open and linecap == 'round':
            pieces.append(self._circle(points[0], half))
            pieces.append(self._circle(points[-1], half))
        return pieces

    def _dot(self, center, half: float, linecap: str) -> list:
        if linecap == 'round':
            return self._circle(center, half)
        cx, cy = center
        return [(cx - half, cy - half), (cx + half, cy - half), (cx + half, cy + half), (cx - half, cy + half)]

    def _circle(self, center, radius: float) -> list:
        cx, cy = center
        steps = self._arc_steps(radius, 360.0)
        return [(cx + radius * math.cos(2 * math.pi * i / steps), cy + radius * math.sin(2 * math.pi * i / steps))
                for i in range(steps)]

    def get_rgb_buffer(self) -> np.ndarray:
        return self.buffer[:, :, 0:3].copy()

    def get_rgba_buffer(self) -> np.ndarray:
        return self.buffer.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.get_rgba_buffer())
