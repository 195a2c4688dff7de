"""
Exception types for the Image Toolkit.

Every failure raised by the core package derives from ImagingError and also
from the closest built-in exception, so callers may catch either.
"""


class ImagingError(Exception):
    """Base class for all toolkit errors."""


class UnknownFormatError(ImagingError, ValueError):
    """File extension does not map to a supported image format."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unknown file format: {extension}")


class UnsupportedFormatError(ImagingError, ValueError):
    """Native pixel layout tag is not one of the supported layouts."""

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Unsupported pixel layout: {tag}")


class InvalidArgumentError(ImagingError, ValueError):
    """Geometry argument outside its valid domain (negative extent, bad angle)."""


class OutOfBoundsError(ImagingError, IndexError):
    """Raw pixel access outside the buffer extent."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(f"Pixel ({x}, {y}) is outside {width}x{height} image")


class IOFailureError(ImagingError, OSError):
    """Stream, file or codec failure surfaced from the underlying library."""


class ImageNotFoundError(IOFailureError):
    """Requested image does not exist in storage."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Image {name} not found")
