"""
Schemas Package

This package contains the Pydantic schemas for request validation and
response serialization of the HTTP API.
"""

from .image import (
    CropParams,
    ImageListResponse,
    ImageSizeResponse,
    ResizeParams,
    TransformRequest,
)

__all__ = [
    "CropParams",
    "ImageListResponse",
    "ImageSizeResponse",
    "ResizeParams",
    "TransformRequest",
]
