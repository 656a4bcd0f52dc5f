from __future__ import annotations


class SVGError(Exception):
    """Base class for every error raised by this package."""


class MalformedTransform(SVGError, ValueError):
    """A transform list is structurally broken (unbalanced parens, bad numbers)."""


class UnknownTransformFunction(MalformedTransform):
    def __init__(self, name: str):
        super().__init__(f"Unknown transform function: {name!r}")
        self.name = name


class SVGParseError(SVGError, ValueError):
    """Markup could not be turned into a node tree."""


class BackendRenderFailure(SVGError):
    """Raised by a raster backend that cannot draw a shape."""
