"""
Image buffer abstraction.

An ImageBuffer owns a dense (height, width) array of packed 0xAARRGGBB
integers plus the pixel format it was created with. Buffers of the OPAQUE
format always store alpha 0xFF.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from core.constants import ImageConstants
from core.exceptions import OutOfBoundsError
from core.image.formats import PixelFormat

if TYPE_CHECKING:
    from core.image.graphics import Graphics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSize:
    """Image dimensions in pixels"""

    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.width, self.height)


def unpack_argb(pixels: np.ndarray) -> np.ndarray:
    """
    Split packed ARGB integers into an (..., 4) uint8 RGBA channel array.

    Args:
        pixels: Array of packed 0xAARRGGBB values

    Returns:
        Channel array in R, G, B, A order
    """
    pixels = np.asarray(pixels, dtype=np.uint32)
    rgba = np.empty(pixels.shape + (4,), dtype=np.uint8)
    rgba[..., 0] = ((pixels >> 16) & 0xFF).astype(np.uint8)
    rgba[..., 1] = ((pixels >> 8) & 0xFF).astype(np.uint8)
    rgba[..., 2] = (pixels & 0xFF).astype(np.uint8)
    rgba[..., 3] = (pixels >> 24).astype(np.uint8)
    return rgba


def pack_argb(rgba: np.ndarray) -> np.ndarray:
    """
    Pack an (..., 4) RGBA channel array into 0xAARRGGBB integers.

    Args:
        rgba: Channel array in R, G, B, A order

    Returns:
        uint32 array without the channel axis
    """
    channels = np.asarray(rgba).astype(np.uint32)
    return (
        (channels[..., 3] << 24)
        | (channels[..., 0] << 16)
        | (channels[..., 1] << 8)
        | channels[..., 2]
    )


class ImageBuffer:
    """
    Owned raster of packed ARGB pixels.

    Operations that change dimensions or format never mutate a buffer, they
    return a new one. In-place changes happen only through set_pixel and the
    drawing context returned by create_graphics().
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixel_format: PixelFormat,
        pixels: Optional[np.ndarray] = None,
    ):
        """
        Initialize image buffer

        Args:
            width: Width in pixels, values below 1 become 1
            height: Height in pixels, values below 1 become 1
            pixel_format: Pixel format tag
            pixels: Optional (height, width) array of packed ARGB values,
                copied into the buffer
        """
        self._width = max(int(width), ImageConstants.MIN_IMAGE_DIMENSION)
        self._height = max(int(height), ImageConstants.MIN_IMAGE_DIMENSION)
        self._format = PixelFormat(pixel_format)

        if pixels is None:
            fill = (
                ImageConstants.TRANSPARENT
                if self._format.has_alpha
                else ImageConstants.OPAQUE_BLACK
            )
            self._pixels = np.full((self._height, self._width), fill, dtype=np.uint32)
        else:
            pixels = np.array(pixels, dtype=np.uint32)
            if pixels.shape != (self._height, self._width):
                raise ValueError(
                    f"Pixel array shape {pixels.shape} does not match "
                    f"{self._width}x{self._height}"
                )
            if not self._format.has_alpha:
                pixels |= np.uint32(ImageConstants.ALPHA_MASK)
            self._pixels = pixels

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixel_format(self) -> PixelFormat:
        return self._format

    @property
    def size(self) -> ImageSize:
        return ImageSize(self._width, self._height)

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the packed (height, width) pixel array."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise OutOfBoundsError(x, y, self._width, self._height)

    def get_pixel(self, x: int, y: int) -> int:
        """
        Get packed ARGB value at (x, y).

        Raises:
            OutOfBoundsError: If (x, y) lies outside the buffer
        """
        self._check_bounds(x, y)
        return int(self._pixels[y, x])

    def set_pixel(self, x: int, y: int, argb: int) -> None:
        """
        Set packed ARGB value at (x, y). OPAQUE buffers keep alpha 0xFF.

        Raises:
            OutOfBoundsError: If (x, y) lies outside the buffer
        """
        self._check_bounds(x, y)
        value = int(argb) & 0xFFFFFFFF
        if not self._format.has_alpha:
            value |= ImageConstants.ALPHA_MASK
        self._pixels[y, x] = value

    def _write_region(self, left: int, top: int, values: np.ndarray) -> None:
        """Overwrite the block at (left, top); OPAQUE buffers keep alpha 0xFF."""
        block = np.asarray(values, dtype=np.uint32)
        if not self._format.has_alpha:
            block = block | np.uint32(ImageConstants.ALPHA_MASK)
        height, width = block.shape
        self._pixels[top : top + height, left : left + width] = block

    def copy(self) -> "ImageBuffer":
        return ImageBuffer(self._width, self._height, self._format, self._pixels)

    def is_equal_to(self, other: "ImageBuffer") -> bool:
        return pixels_equal(self, other)

    def create_graphics(self) -> "Graphics":
        """Open a drawing context on this buffer. Dispose it or use it with 'with'."""
        from core.image.graphics import Graphics

        return Graphics(self)

    def create_best_quality_graphics(self) -> "Graphics":
        """Drawing context with antialiasing and quality rendering enabled."""
        from core.image.graphics import Graphics

        return Graphics.best_quality(self)

    def __repr__(self) -> str:
        return f"ImageBuffer({self._width}x{self._height}, {self._format.name})"


def create(width: int, height: int, pixel_format: PixelFormat) -> ImageBuffer:
    """
    Create a blank image buffer.

    Non-positive dimensions are coerced to 1 instead of failing, so drawing
    code never needs to special-case empty sizes.

    Args:
        width: Width in pixels
        height: Height in pixels
        pixel_format: Pixel format of the new buffer

    Returns:
        Opaque black (OPAQUE) or fully transparent (ALPHA) buffer
    """
    if width <= 0 or height <= 0:
        logger.debug(f"Coercing requested size {width}x{height} to positive dimensions")
    return ImageBuffer(width, height, pixel_format)


def pixels_equal(a: ImageBuffer, b: ImageBuffer) -> bool:
    """
    Pixel by pixel comparison of two images. Useful for tests.

    Returns:
        False if dimensions differ, otherwise True only when every ARGB value matches
    """
    if a.width != b.width or a.height != b.height:
        return False
    return bool(np.array_equal(a.pixels, b.pixels))
