"""
Shared FastAPI dependencies for the Image Toolkit API.
"""

import logging

from fastapi import Depends, HTTPException, Request

from config import Settings, get_settings
from services.image_service import ImageService

logger = logging.getLogger(__name__)


def get_image_service(request: Request) -> ImageService:
    """
    Get ImageService instance from app state.

    Raises:
        HTTPException: If the service is not initialized
    """
    try:
        return request.app.state.image_service
    except AttributeError as e:
        logger.error(f"Image service not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Image service not initialized"
        )


def get_chunk_size(settings: Settings = Depends(get_settings)) -> int:
    """Chunk size for streamed file responses."""
    return settings.image.stream_chunk_size
