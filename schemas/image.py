"""
Image API models.

This module contains models for image operations:
- Transform requests (crop, rotate, resize, format conversion)
- Size and listing responses
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from core.constants import ImageConstants
from core.image.formats import PixelFormat


class CropParams(BaseModel):
    """Crop rectangle; may extend past the image, it is clipped"""

    x: int = Field(..., description="Left edge, may be negative")
    y: int = Field(..., description="Top edge, may be negative")
    width: int = Field(..., description="Rectangle width")
    height: int = Field(..., description="Rectangle height")


class ResizeParams(BaseModel):
    """Exact target size"""

    width: int = Field(..., ge=1, le=ImageConstants.MAX_IMAGE_DIMENSION)
    height: int = Field(..., ge=1, le=ImageConstants.MAX_IMAGE_DIMENSION)


class TransformRequest(BaseModel):
    """
    Operations applied to a stored image, in this order:
    crop, rotate, resize / scale, format conversion.
    """

    crop: Optional[CropParams] = None
    rotate: Optional[int] = Field(None, description="Angle in degrees, multiple of 90")
    resize: Optional[ResizeParams] = None
    scale_to_width: Optional[int] = Field(None, ge=1, le=ImageConstants.MAX_IMAGE_DIMENSION)
    scale_to_height: Optional[int] = Field(None, ge=1, le=ImageConstants.MAX_IMAGE_DIMENSION)
    format: Optional[PixelFormat] = Field(None, description="Output format: jpeg or png")
    save_as: Optional[str] = Field(None, description="Also store the result under this name")

    @model_validator(mode="after")
    def check_single_resize(self) -> "TransformRequest":
        requested = [
            name
            for name in ("resize", "scale_to_width", "scale_to_height")
            if getattr(self, name) is not None
        ]
        if len(requested) > 1:
            raise ValueError(f"Only one of resize, scale_to_width, scale_to_height allowed: {requested}")
        return self


class ImageSizeResponse(BaseModel):
    """Image dimensions read from the file header"""

    name: str
    width: int
    height: int
    format: PixelFormat
    content_type: str


class ImageListResponse(BaseModel):
    """Stored image names"""

    images: List[str]
