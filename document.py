from __future__ import annotations
import logging
import re
from typing import Optional, Sequence
from PIL import Image
from geometry import parse_length
from nodes import SVGDocumentFragment
from parser import parse_svg_string
from rasterizer import rasterize
from renderer import Renderer
from transform import Transform
from writer import SVGWriter

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_SIZE = 100.0

viewbox_separator = re.compile(r'[\s,]+')


class SVGDocument:
    """An SVG image: the root <svg> node plus viewport handling.

    Width and height may carry units (`"10cm"`); a missing size falls back to
    the viewBox and then to 100 user units.
    """

    def __init__(self, width=None, height=None, root: SVGDocumentFragment = None):
        self.root = root if root is not None else SVGDocumentFragment(width, height)

    @staticmethod
    def from_string(data: str) -> 'SVGDocument':
        return SVGDocument(root=parse_svg_string(data))

    def get_document(self) -> SVGDocumentFragment:
        return self.root

    def to_xml_string(self, standalone: bool = True) -> str:
        writer = SVGWriter(standalone)
        writer.write_node(self.root)
        return writer.get_string()

    def __str__(self) -> str:
        return self.to_xml_string()

    def get_viewbox(self) -> Optional[tuple[float, float, float, float]]:
        viewbox_str = self.root.get_attribute('viewBox')
        if not viewbox_str:
            return None

        parts = [p for p in viewbox_separator.split(viewbox_str.strip()) if p]
        if len(parts) != 4:
            return None
        try:
            min_x, min_y, width, height = (float(p) for p in parts)
        except ValueError:
            return None
        if width <= 0 or height <= 0:
            return None
        return (min_x, min_y, width, height)

    def get_viewport(self) -> tuple[float, float]:
        viewbox = self.get_viewbox()
        width = self.root.get_width()
        height = self.root.get_height()

        if width is not None and not width.strip().endswith('%'):
            viewport_width = parse_length(width)
        else:
            viewport_width = viewbox[2] if viewbox else DEFAULT_VIEWPORT_SIZE

        if height is not None and not height.strip().endswith('%'):
            viewport_height = parse_length(height)
        else:
            viewport_height = viewbox[3] if viewbox else DEFAULT_VIEWPORT_SIZE

        return (viewport_width, viewport_height)

    def viewport_transform(self, width: float, height: float) -> Transform:
        """Maps user space onto a raster of the given size."""
        viewport_width, viewport_height = self.get_viewport()
        viewbox = self.get_viewbox()

        if viewbox is None:
            sx = width / viewport_width if viewport_width > 0 else 1.0
            sy = height / viewport_height if viewport_height > 0 else 1.0
            return Transform.scale(sx, sy)

        vb_min_x, vb_min_y, vb_width, vb_height = viewbox
        scale_x = width / vb_width
        scale_y = height / vb_height

        preserve_aspect = self.root.get_attribute('preserveAspectRatio') or 'xMidYMid meet'
        parts = preserve_aspect.strip().split()
        align = parts[0] if parts else 'xMidYMid'

        if align == 'none':
            return Transform(scale_x, 0.0, 0.0, scale_y, -vb_min_x * scale_x, -vb_min_y * scale_y)

        meet_or_slice = parts[1] if len(parts) > 1 else 'meet'
        scale = max(scale_x, scale_y) if meet_or_slice == 'slice' else min(scale_x, scale_y)

        extra_x = width - vb_width * scale
        extra_y = height - vb_height * scale

        if 'xMin' in align:
            offset_x = 0.0
        elif 'xMax' in align:
            offset_x = extra_x
        else:
            offset_x = extra_x / 2.0

        if 'YMin' in align:
            offset_y = 0.0
        elif 'YMax' in align:
            offset_y = extra_y
        else:
            offset_y = extra_y / 2.0

        return Transform(scale, 0.0, 0.0, scale,
                         offset_x - vb_min_x * scale, offset_y - vb_min_y * scale)

    def to_raster_image(self, width: int = None, height: int = None,
                        background_color: Sequence[int] = (255, 255, 255)) -> Image.Image:
        viewport_width, viewport_height = self.get_viewport()
        if viewport_width <= 0 or viewport_height <= 0:
            raise ValueError(f"Invalid viewport size: {viewport_width}x{viewport_height}")

        if width is None and height is None:
            width, height = viewport_width, viewport_height
        elif width is None:
            width = height * viewport_width / viewport_height
        elif height is None:
            height = width * viewport_height / viewport_width

        width = max(1, int(round(width)))
        height = max(1, int(round(height)))
        logger.info("Rasterizing SVG document at %dx%d", width, height)

        renderer = Renderer(width, height, background_color=background_color,
                            base_transform=self.viewport_transform(width, height))
        rasterize(self.root, renderer)
        return renderer.to_image()
