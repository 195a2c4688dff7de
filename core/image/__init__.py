"""
Image buffer toolkit - modular architecture.

This package provides focused image utilities:
- formats: Pixel formats (OPAQUE/JPEG, ALPHA/PNG), content types, encoder options
- buffer: Packed ARGB image buffer, creation and pixel comparison
- graphics: Scoped drawing context (scaled blits, rotation, rendering hints)
- converters: Format conversions (OPAQUE <-> ALPHA, NumPy, PIL)
- processors: Progressive-halving resize and aspect-preserving scaling
- geometry: Boundary-safe crop and quadrant rotation
- codec: Decode, encode, load, save and header-only size probing
"""

from core.image.buffer import ImageBuffer, ImageSize, create, pixels_equal
from core.image.codec import ImageCodec
from core.image.converters import ImageConverters
from core.image.formats import PixelFormat
from core.image.geometry import ImageGeometry
from core.image.graphics import Graphics, Interpolation, RenderHint
from core.image.processors import ImageProcessors

__all__ = [
    "ImageBuffer",
    "ImageSize",
    "create",
    "pixels_equal",
    "PixelFormat",
    "Graphics",
    "Interpolation",
    "RenderHint",
    "ImageCodec",
    "ImageConverters",
    "ImageGeometry",
    "ImageProcessors",
]
