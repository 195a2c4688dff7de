"""
Image format conversion utilities.

Handles conversions between:
- OPAQUE and ALPHA image buffers (to_jpeg / to_png)
- Image buffers and NumPy channel arrays (RGB/RGBA, or OpenCV BGR/BGRA)
- Image buffers and PIL Images
"""

import logging

import cv2
import numpy as np
from PIL import Image

from core.exceptions import UnsupportedFormatError
from core.image.buffer import ImageBuffer, create, pack_argb, unpack_argb
from core.image.formats import PixelFormat

logger = logging.getLogger(__name__)


def convert(image: ImageBuffer, pixel_format: PixelFormat) -> ImageBuffer:
    """
    Render image into a new buffer of the given format and the same size.

    ALPHA sources drawn into an OPAQUE buffer are composited over black.

    Args:
        image: Source buffer
        pixel_format: Target pixel format

    Returns:
        New buffer, even when the format already matches
    """
    converted = create(image.width, image.height, pixel_format)
    with converted.create_graphics() as g:
        g.draw_image(image, 0, 0)
    return converted


def to_jpeg(image: ImageBuffer) -> ImageBuffer:
    """Convert to an OPAQUE buffer. Useful for png to jpeg conversion."""
    return convert(image, PixelFormat.OPAQUE)


def to_png(image: ImageBuffer) -> ImageBuffer:
    """Convert to an ALPHA buffer."""
    return convert(image, PixelFormat.ALPHA)


def to_rgba_array(image: ImageBuffer) -> np.ndarray:
    """
    Convert image buffer to a (height, width, 4) uint8 RGBA array.

    Args:
        image: Source buffer

    Returns:
        New channel array
    """
    return unpack_argb(image.pixels)


def from_array(image: np.ndarray, pixel_format: PixelFormat, bgr: bool = False) -> ImageBuffer:
    """
    Convert NumPy array to an image buffer.

    Args:
        image: Grayscale (H, W), color (H, W, 3) or color+alpha (H, W, 4) uint8 array
        pixel_format: Pixel format of the new buffer
        bgr: If True, channels are in OpenCV BGR/BGRA order

    Returns:
        New image buffer
    """
    array = np.asarray(image, dtype=np.uint8)

    if array.ndim == 2:
        array = cv2.cvtColor(array, cv2.COLOR_GRAY2RGBA)
    elif array.ndim == 3 and array.shape[2] == 3:
        array = cv2.cvtColor(array, cv2.COLOR_BGR2RGBA if bgr else cv2.COLOR_RGB2RGBA)
    elif array.ndim == 3 and array.shape[2] == 4:
        if bgr:
            array = cv2.cvtColor(array, cv2.COLOR_BGRA2RGBA)
    else:
        raise ValueError(f"Unsupported array shape: {array.shape}")

    height, width = array.shape[:2]
    return ImageBuffer(width, height, pixel_format, pack_argb(array))


def to_pil(image: ImageBuffer) -> Image.Image:
    """
    Convert image buffer to PIL Image.

    Returns:
        PIL Image in RGB mode for OPAQUE buffers, RGBA mode for ALPHA buffers
    """
    rgba = to_rgba_array(image)
    if image.pixel_format.has_alpha:
        return Image.fromarray(rgba)
    return Image.fromarray(np.ascontiguousarray(rgba[..., :3]))


def from_pil(image: Image.Image, pixel_format: PixelFormat) -> ImageBuffer:
    """
    Convert PIL Image to an image buffer of the given format.

    Args:
        image: PIL Image in any mode Pillow can convert to RGB/RGBA
        pixel_format: Pixel format of the new buffer

    Returns:
        New image buffer
    """
    native_tag = pixel_format.to_native_tag()
    if image.mode != native_tag:
        try:
            image = image.convert(native_tag)
        except ValueError as e:
            logger.error(f"Failed to convert PIL mode {image.mode} to {native_tag}: {e}")
            raise UnsupportedFormatError(image.mode) from e

    array = np.asarray(image, dtype=np.uint8)
    return from_array(array, PixelFormat.from_native_tag(image.mode))


class ImageConverters:
    """Utilities for converting between image formats."""

    convert = staticmethod(convert)
    to_jpeg = staticmethod(to_jpeg)
    to_png = staticmethod(to_png)
    to_rgba_array = staticmethod(to_rgba_array)
    from_array = staticmethod(from_array)
    to_pil = staticmethod(to_pil)
    from_pil = staticmethod(from_pil)
