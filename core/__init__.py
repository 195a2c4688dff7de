"""
Core modules for the Image Toolkit
"""

from .exceptions import (
    ImageNotFoundError,
    ImagingError,
    InvalidArgumentError,
    IOFailureError,
    OutOfBoundsError,
    UnknownFormatError,
    UnsupportedFormatError,
)

__all__ = [
    "ImagingError",
    "ImageNotFoundError",
    "InvalidArgumentError",
    "IOFailureError",
    "OutOfBoundsError",
    "UnknownFormatError",
    "UnsupportedFormatError",
]
