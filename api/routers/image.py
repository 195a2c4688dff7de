"""
Image API Router - Stored image retrieval and transformation
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_chunk_size, get_image_service
from api.exceptions import safe_endpoint
from api.responses import send_buffer, send_file
from schemas import ImageListResponse, ImageSizeResponse, TransformRequest
from services.image_service import ImageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/files")
@safe_endpoint
def list_images(image_service: ImageService = Depends(get_image_service)) -> ImageListResponse:
    """List stored images."""
    return ImageListResponse(images=image_service.list_images())


@router.get("/files/{name:path}/size")
@safe_endpoint
def get_image_size(
    name: str, image_service: ImageService = Depends(get_image_service)
) -> ImageSizeResponse:
    """
    Get stored image dimensions.

    Only the file header is read, so this is cheap even for large images.
    """
    size, pixel_format = image_service.get_size(name)
    return ImageSizeResponse(
        name=name,
        width=size.width,
        height=size.height,
        format=pixel_format,
        content_type=pixel_format.to_content_type(),
    )


@router.post("/files/{name:path}/transform")
@safe_endpoint
def transform_image(
    name: str,
    request: TransformRequest,
    image_service: ImageService = Depends(get_image_service),
):
    """
    Crop, rotate, resize and/or convert a stored image.

    Operations run in the order crop, rotate, resize, format conversion. The
    result is encoded in memory and returned with its exact Content-Length.
    """
    image, output_format = image_service.transform(name, request)
    return send_buffer(image, output_format)


@router.get("/files/{name:path}")
@safe_endpoint
def get_image(
    name: str,
    image_service: ImageService = Depends(get_image_service),
    chunk_size: int = Depends(get_chunk_size),
):
    """Stream a stored image file unchanged."""
    return send_file(image_service.resolve(name), chunk_size)
