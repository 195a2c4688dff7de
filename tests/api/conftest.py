"""
Pytest configuration for API integration tests
"""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from core.image import codec
from core.image.converters import from_array
from core.image.formats import PixelFormat


def _fill(width: int, height: int, channels: int) -> np.ndarray:
    image = np.zeros((height, width, channels), dtype=np.uint8)
    image[:, : width // 2] = 200
    if channels == 4:
        image[..., 3] = 255
        image[: height // 2, :, 3] = 128
    return image


@pytest.fixture
def storage(tmp_path):
    """
    Storage directory with:
    - photo.jpg: 200x100 JPEG
    - logo.png: 64x64 PNG with transparency
    - nested/thumb.jpg: 20x10 JPEG
    - notes.txt: not an image
    """
    root = tmp_path / "images"
    codec.save(from_array(_fill(200, 100, 3), PixelFormat.OPAQUE), root / "photo.jpg")
    codec.save(from_array(_fill(64, 64, 4), PixelFormat.ALPHA), root / "logo.png")
    codec.save(from_array(_fill(20, 10, 3), PixelFormat.OPAQUE), root / "nested" / "thumb.jpg")
    (root / "notes.txt").write_text("not an image")
    return root


@pytest.fixture(scope="function")
def client(storage):
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from main import app
    from services.image_service import ImageService

    app.state.image_service = ImageService(storage)
    app.state.config = {}

    # Create test client (no context manager to skip the lifespan)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    del app.state.image_service
