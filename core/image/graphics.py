"""
Drawing context for image buffers.

A Graphics object draws into exactly one ImageBuffer. It carries rendering
hints and a 2D affine transform, and must be disposed after use:

    with image.create_graphics() as g:
        g.translate(10, 10)
        g.draw_image(other, 0, 0)

Transforms concatenate like Java2D: the most recently added transform is
applied first to user-space coordinates. Drawing composites source-over in
premultiplied alpha; OPAQUE targets always keep alpha 0xFF.
"""

import math
from enum import Enum
from typing import Any, Dict, Optional

import cv2
import numpy as np

from core.constants import GeometryConstants
from core.image.buffer import ImageBuffer, pack_argb, unpack_argb


class RenderHint(str, Enum):
    """Rendering hint keys"""

    INTERPOLATION = "interpolation"
    ANTIALIASING = "antialiasing"
    RENDER_QUALITY = "render_quality"
    TEXT_ANTIALIASING = "text_antialiasing"
    FRACTIONAL_METRICS = "fractional_metrics"


class Interpolation(str, Enum):
    """Resampling used when an image is scaled or transformed"""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"


_CV2_INTERPOLATION = {
    Interpolation.NEAREST: cv2.INTER_NEAREST,
    Interpolation.BILINEAR: cv2.INTER_LINEAR,
    Interpolation.BICUBIC: cv2.INTER_CUBIC,
}


def _translation(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def _scaling(sx: float, sy: float) -> np.ndarray:
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


def _rotation(theta: float) -> np.ndarray:
    cos, sin = math.cos(theta), math.sin(theta)

    # Exact quadrant rotations
    if abs(cos) < GeometryConstants.QUADRANT_EPSILON:
        cos, sin = 0.0, math.copysign(1.0, sin)
    elif abs(sin) < GeometryConstants.QUADRANT_EPSILON:
        cos, sin = math.copysign(1.0, cos), 0.0

    return np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])


def _premultiply(rgba: np.ndarray) -> np.ndarray:
    """RGBA uint8 -> float32 with color channels multiplied by alpha (0-255 scale)."""
    premultiplied = rgba.astype(np.float32)
    premultiplied[..., :3] *= premultiplied[..., 3:4] / 255.0
    return premultiplied


def _composite(source: np.ndarray, target: np.ndarray, opaque: bool) -> np.ndarray:
    """
    Source-over composite of premultiplied source onto packed target pixels.

    Args:
        source: Premultiplied float RGBA array
        target: Packed ARGB array of the same height and width
        opaque: If True, result alpha is forced to 0xFF

    Returns:
        Packed ARGB array
    """
    source = np.clip(source.astype(np.float64), 0.0, 255.0)
    target_rgba = unpack_argb(target).astype(np.float64)

    source_alpha = source[..., 3:4] / 255.0
    target_alpha = target_rgba[..., 3:4] / 255.0

    out_alpha = source_alpha + target_alpha * (1.0 - source_alpha)
    out_premultiplied = source[..., :3] + target_rgba[..., :3] * target_alpha * (1.0 - source_alpha)

    with np.errstate(divide="ignore", invalid="ignore"):
        out_color = np.where(out_alpha > 0, out_premultiplied / out_alpha, 0.0)

    result = np.empty(target.shape + (4,), dtype=np.uint8)
    result[..., :3] = np.clip(np.rint(out_color), 0, 255).astype(np.uint8)
    if opaque:
        result[..., 3] = 255
    else:
        result[..., 3] = np.clip(np.rint(out_alpha[..., 0] * 255.0), 0, 255).astype(np.uint8)

    return pack_argb(result)


class Graphics:
    """Scoped drawing context bound to a single ImageBuffer."""

    def __init__(self, target: ImageBuffer):
        self._target: Optional[ImageBuffer] = target
        self._hints: Dict[RenderHint, Any] = {}
        self._transform = np.eye(3)

    @classmethod
    def best_quality(cls, target: ImageBuffer) -> "Graphics":
        """Context with antialiasing, quality rendering and text quality hints on."""
        graphics = cls(target)
        graphics.set_rendering_hint(RenderHint.ANTIALIASING, True)
        graphics.set_rendering_hint(RenderHint.RENDER_QUALITY, True)
        graphics.set_rendering_hint(RenderHint.TEXT_ANTIALIASING, True)
        graphics.set_rendering_hint(RenderHint.FRACTIONAL_METRICS, True)
        return graphics

    # Lifecycle

    def __enter__(self) -> "Graphics":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.dispose()
        return False

    @property
    def disposed(self) -> bool:
        return self._target is None

    def dispose(self) -> None:
        """Release the context. Further drawing raises RuntimeError."""
        self._target = None
        self._hints.clear()

    def _require_target(self) -> ImageBuffer:
        if self._target is None:
            raise RuntimeError("Graphics context has been disposed")
        return self._target

    # Hints

    def set_rendering_hint(self, key: RenderHint, value: Any) -> None:
        self._require_target()
        key = RenderHint(key)
        if key is RenderHint.INTERPOLATION:
            value = Interpolation(value)
        self._hints[key] = value

    def get_rendering_hint(self, key: RenderHint) -> Any:
        return self._hints.get(RenderHint(key))

    @property
    def interpolation(self) -> Interpolation:
        """Explicit interpolation hint, else bilinear for quality rendering, else nearest."""
        interpolation = self._hints.get(RenderHint.INTERPOLATION)
        if interpolation is not None:
            return interpolation
        if self._hints.get(RenderHint.ANTIALIASING) or self._hints.get(RenderHint.RENDER_QUALITY):
            return Interpolation.BILINEAR
        return Interpolation.NEAREST

    # Transform

    @property
    def transform(self) -> np.ndarray:
        """Copy of the current 3x3 user-to-device transform."""
        return self._transform.copy()

    def translate(self, tx: float, ty: float) -> None:
        self._require_target()
        self._transform = self._transform @ _translation(tx, ty)

    def rotate(self, theta: float, cx: float = 0.0, cy: float = 0.0) -> None:
        """
        Rotate by theta radians around (cx, cy) in user space.

        Positive angles turn clockwise on screen (y axis points down).
        """
        self._require_target()
        self._transform = (
            self._transform @ _translation(cx, cy) @ _rotation(theta) @ _translation(-cx, -cy)
        )

    # Drawing

    def draw_image(
        self,
        image: ImageBuffer,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        """
        Draw image with its top-left corner at (x, y), scaled to width x height.

        Args:
            image: Source buffer (not modified)
            x: Left edge in user space
            y: Top edge in user space
            width: Drawn width, defaults to image width
            height: Drawn height, defaults to image height
        """
        self._require_target()
        width = image.width if width is None else int(width)
        height = image.height if height is None else int(height)
        if width <= 0 or height <= 0:
            return

        self._draw_rgba(unpack_argb(image.pixels), x, y, width, height)

    def draw_rendered_image(self, image: ImageBuffer) -> None:
        """Draw image at the user-space origin under the current transform."""
        self.draw_image(image, 0, 0)

    def fill_rect(self, x: int, y: int, width: int, height: int, argb: int) -> None:
        """Fill a rectangle with a packed ARGB color."""
        self._require_target()
        if width <= 0 or height <= 0:
            return

        color = unpack_argb(np.array([[int(argb) & 0xFFFFFFFF]], dtype=np.uint32))
        self._draw_rgba(np.tile(color, (int(height), int(width), 1)), x, y, int(width), int(height))

    def _draw_rgba(self, rgba: np.ndarray, x: int, y: int, width: int, height: int) -> None:
        target = self._require_target()
        source = _premultiply(rgba)
        source_height, source_width = rgba.shape[:2]

        linear = self._transform[:2, :2]
        offset = self._transform[:2, 2] + (x, y)

        if np.array_equal(linear, np.eye(2)) and np.array_equal(offset, np.round(offset)):
            if (width, height) != (source_width, source_height):
                source = cv2.resize(
                    source, (width, height), interpolation=_CV2_INTERPOLATION[self.interpolation]
                )
            self._blend_at(target, source, int(offset[0]), int(offset[1]))
            return

        device = (
            self._transform
            @ _translation(x, y)
            @ _scaling(width / source_width, height / source_height)
        )
        self._blend_warped(target, source, device)

    def _blend_at(self, target: ImageBuffer, source: np.ndarray, left: int, top: int) -> None:
        source_height, source_width = source.shape[:2]
        x1, y1 = max(left, 0), max(top, 0)
        x2 = min(left + source_width, target.width)
        y2 = min(top + source_height, target.height)
        if x2 <= x1 or y2 <= y1:
            return

        region = source[y1 - top : y2 - top, x1 - left : x2 - left]
        blended = _composite(
            region, target.pixels[y1:y2, x1:x2], opaque=not target.pixel_format.has_alpha
        )
        target._write_region(x1, y1, blended)

    def _blend_warped(self, target: ImageBuffer, source: np.ndarray, device: np.ndarray) -> None:
        # Device transform maps pixel corners; OpenCV samples at integer pixel centers
        linear = device[:2, :2]
        shift = device[:2, 2] + linear @ np.array([0.5, 0.5]) - 0.5
        matrix = np.hstack([linear, shift.reshape(2, 1)])

        warped = cv2.warpAffine(
            source,
            matrix,
            (target.width, target.height),
            flags=_CV2_INTERPOLATION[self.interpolation],
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )
        blended = _composite(warped, target.pixels, opaque=not target.pixel_format.has_alpha)
        target._write_region(0, 0, blended)
