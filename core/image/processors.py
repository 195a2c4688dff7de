"""
Image processing operations.

Handles resizing:
- Progressive-halving resize to exact dimensions
- Aspect-preserving scaling to a width or height
"""

import logging
import math
from typing import List, Optional, Tuple

from core.constants import ImageConstants
from core.image.buffer import ImageBuffer, create
from core.image.formats import PixelFormat
from core.image.graphics import Interpolation, RenderHint

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def plan_resize_steps(
    width: int, height: int, target_width: int, target_height: int
) -> List[Tuple[int, int]]:
    """
    Compute the intermediate sizes a resize walks through.

    Each step at most halves a dimension that is larger than its target, and
    jumps straight to the target for a dimension that is smaller or close
    enough. The last entry is always (target_width, target_height).

    Args:
        width: Source width
        height: Source height
        target_width: Final width (>= 1)
        target_height: Final height (>= 1)

    Returns:
        List of (width, height) steps, empty if sizes already match
    """
    steps = []
    while (width, height) != (target_width, target_height):
        width = max(width // 2, target_width)
        height = max(height // 2, target_height)
        steps.append((width, height))
    return steps


def resize(
    image: ImageBuffer,
    target_width: int,
    target_height: int,
    pixel_format: Optional[PixelFormat] = None,
) -> ImageBuffer:
    """
    Resize image to exact dimensions by progressive halving.

    Use this instead of a single large-ratio resample: bilinear filtering
    degrades visibly once one pass shrinks more than 2x, so the image is
    halved repeatedly and only the last pass lands on the target size.

    Args:
        image: Source buffer
        target_width: Target width, values below 1 become 1
        target_height: Target height, values below 1 become 1
        pixel_format: Format of the result, defaults to the source format

    Returns:
        The source itself if the size already matches, otherwise a new buffer
    """
    target_width = max(int(target_width), ImageConstants.MIN_IMAGE_DIMENSION)
    target_height = max(int(target_height), ImageConstants.MIN_IMAGE_DIMENSION)
    pixel_format = pixel_format or image.pixel_format

    steps = plan_resize_steps(image.width, image.height, target_width, target_height)
    if not steps:
        return image

    logger.debug(
        f"Resizing {image.width}x{image.height} -> {target_width}x{target_height} "
        f"in {len(steps)} step(s)"
    )

    current = image
    for width, height in steps:
        step = create(width, height, pixel_format)
        with step.create_graphics() as g:
            g.set_rendering_hint(RenderHint.INTERPOLATION, Interpolation.BILINEAR)
            g.draw_image(current, 0, 0, width, height)
        current = step

    return current


def scale_to_width(
    image: ImageBuffer, target_width: int, pixel_format: Optional[PixelFormat] = None
) -> ImageBuffer:
    """Scale image to the given width preserving aspect ratio."""
    if target_width == image.width:
        return image

    target_height = round_half_up(target_width * image.height / image.width)
    return resize(image, target_width, target_height, pixel_format)


def scale_to_height(
    image: ImageBuffer, target_height: int, pixel_format: Optional[PixelFormat] = None
) -> ImageBuffer:
    """Scale image to the given height preserving aspect ratio."""
    if target_height == image.height:
        return image

    target_width = round_half_up(target_height * image.width / image.height)
    return resize(image, target_width, target_height, pixel_format)


class ImageProcessors:
    """Resize operations on image buffers."""

    resize = staticmethod(resize)
    scale_to_width = staticmethod(scale_to_width)
    scale_to_height = staticmethod(scale_to_height)
    plan_resize_steps = staticmethod(plan_resize_steps)
