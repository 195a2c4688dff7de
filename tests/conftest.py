"""
Pytest configuration and fixtures for Image Toolkit tests
"""

import cv2
import numpy as np
import pytest

from core.image import codec
from core.image.buffer import ImageBuffer
from core.image.converters import from_array
from core.image.formats import PixelFormat


def make_gradient(width: int, height: int, alpha: bool = False) -> np.ndarray:
    """RGB(A) uint8 array whose pixels are all distinct enough to track moves"""
    xs, ys = np.meshgrid(np.arange(width), np.arange(height))
    image = np.zeros((height, width, 4 if alpha else 3), dtype=np.uint8)
    image[..., 0] = (xs * 7) % 256
    image[..., 1] = (ys * 11) % 256
    image[..., 2] = (xs + ys) % 256
    if alpha:
        # Keep alpha >= 1 so colors survive premultiplication
        image[..., 3] = 1 + (xs * 3 + ys * 5) % 255
    return image


@pytest.fixture
def opaque_image() -> ImageBuffer:
    """Create a 40x30 OPAQUE gradient image"""
    return from_array(make_gradient(40, 30), PixelFormat.OPAQUE)


@pytest.fixture
def alpha_image() -> ImageBuffer:
    """Create a 40x30 ALPHA gradient image with varying transparency"""
    return from_array(make_gradient(40, 30, alpha=True), PixelFormat.ALPHA)


@pytest.fixture
def photo_image() -> ImageBuffer:
    """Create a 1000x667 test image for testing"""
    image = np.zeros((667, 1000, 3), dtype=np.uint8)
    # Add some content
    cv2.rectangle(image, (100, 100), (300, 300), (255, 255, 255), -1)
    cv2.circle(image, (650, 350), 120, (40, 160, 220), -1)
    return from_array(image, PixelFormat.OPAQUE, bgr=True)


@pytest.fixture
def photo_jpeg(photo_image) -> bytes:
    """1000x667 JPEG bytes"""
    return codec.encode(photo_image, PixelFormat.OPAQUE)
