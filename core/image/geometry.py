"""
Geometric operations on image buffers.

- subimage: crop that clamps to the image instead of failing
- rotate_quadrant: rotation by multiples of 90 degrees
"""

import logging
import math

from core.constants import GeometryConstants
from core.exceptions import InvalidArgumentError
from core.image.buffer import ImageBuffer, create

logger = logging.getLogger(__name__)


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


def subimage(image: ImageBuffer, x: int, y: int, width: int, height: int) -> ImageBuffer:
    """
    Boundary-safe crop.

    The rectangle is clipped to the image. Any rectangle that does not overlap
    the image yields a 1x1 buffer, so chains of crops never need checks in
    between.

    Args:
        image: Source buffer
        x: Left edge, may be negative or beyond the image
        y: Top edge, may be negative or beyond the image
        width: Rectangle width (>= 0)
        height: Rectangle height (>= 0)

    Returns:
        New buffer with the source's pixel format

    Raises:
        InvalidArgumentError: If width or height is negative
    """
    if width < 0 or height < 0:
        raise InvalidArgumentError(f"Width and height should be non-negative: ({width}; {height})")

    # width >= 0, height >= 0 => x1 <= x2, y1 <= y2
    x1 = _clamp(x, 0, image.width)
    x2 = _clamp(x + width, 0, image.width)
    y1 = _clamp(y, 0, image.height)
    y2 = _clamp(y + height, 0, image.height)

    if x2 - x1 == 0 or y2 - y1 == 0:
        logger.debug(
            f"Crop ({x}, {y}, {width}, {height}) is empty on "
            f"{image.width}x{image.height} image, returning 1x1"
        )
        return create(1, 1, image.pixel_format)

    return ImageBuffer(x2 - x1, y2 - y1, image.pixel_format, image.pixels[y1:y2, x1:x2])


def rotate_quadrant(image: ImageBuffer, angle_degrees: int) -> ImageBuffer:
    """
    Rotate image by a multiple of 90 degrees (clockwise for positive angles).

    Args:
        image: Source buffer
        angle_degrees: Rotation angle, must be a multiple of 90

    Returns:
        The source itself for 0, otherwise a new buffer; 90 and 270 degree
        rotations swap width and height

    Raises:
        InvalidArgumentError: If angle is not a multiple of 90
    """
    if angle_degrees == 0:
        return image

    if angle_degrees % GeometryConstants.HALF_TURN_DEGREES == 0:
        width = float(image.width)
        height = float(image.height)
        tx = 0.0
        ty = 0.0
    elif angle_degrees % GeometryConstants.QUADRANT_DEGREES == 0:
        width = float(image.height)
        height = float(image.width)
        tx = (width - height) / 2
        ty = (height - width) / 2
    else:
        raise InvalidArgumentError(f"Angle must be a multiple of 90: {angle_degrees}")

    rotated = create(round(width), round(height), image.pixel_format)

    cx = width / 2
    cy = height / 2

    g = rotated.create_best_quality_graphics()
    try:
        g.translate(tx, ty)
        g.rotate(math.radians(angle_degrees), cx - tx, cy - ty)
        g.draw_rendered_image(image)
    finally:
        g.dispose()

    logger.debug(f"Rotated {image.width}x{image.height} image by {angle_degrees} degrees")
    return rotated


class ImageGeometry:
    """Crop and rotation operations on image buffers."""

    subimage = staticmethod(subimage)
    rotate_quadrant = staticmethod(rotate_quadrant)
