"""
Constants and configuration values for the Image Toolkit.
Centralizes all magic numbers and configuration constants.
"""


# Image Constants
class ImageConstants:
    """Constants related to image buffers and codecs."""

    # Buffer dimensions
    MIN_IMAGE_DIMENSION = 1
    MAX_IMAGE_DIMENSION = 16384

    # Encoding
    JPEG_QUALITY = 1.0  # Quality factor on the [0, 1] scale
    PIL_MAX_QUALITY = 100

    # Packed ARGB layout
    ALPHA_MASK = 0xFF000000
    OPAQUE_BLACK = 0xFF000000
    TRANSPARENT = 0x00000000


# Geometry Constants
class GeometryConstants:
    """Constants for crop and rotation."""

    QUADRANT_DEGREES = 90
    HALF_TURN_DEGREES = 180

    # sin/cos values closer to zero than this are snapped to exactly zero
    QUADRANT_EPSILON = 1e-12


# Transport Constants
class TransportConstants:
    """Constants for sending images over HTTP."""

    DEFAULT_CHUNK_SIZE = 64 * 1024

    CONTENT_TYPE_JPEG = "image/jpeg"
    CONTENT_TYPE_PNG = "image/png"


# API Constants
class APIConstants:
    """Constants for the HTTP surface."""

    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000
    DEFAULT_STORAGE_PATH = "images"
