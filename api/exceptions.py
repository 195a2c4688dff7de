"""
Exception handling for the HTTP API.

Maps toolkit errors to HTTP status codes and provides the safe_endpoint
decorator that logs unexpected failures.
"""

import functools
import inspect
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import (
    ImageNotFoundError,
    ImagingError,
    InvalidArgumentError,
    IOFailureError,
    OutOfBoundsError,
    UnknownFormatError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

# Checked in order, first match wins
ERROR_STATUS_CODES = [
    (ImageNotFoundError, 404),
    (InvalidArgumentError, 400),
    (OutOfBoundsError, 400),
    (UnknownFormatError, 415),
    (UnsupportedFormatError, 415),
    (IOFailureError, 500),
]


def status_code_for(exc: Exception) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def imaging_error_handler(request: Request, exc: ImagingError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register toolkit exception handlers on the app."""
    app.add_exception_handler(ImagingError, imaging_error_handler)


def safe_endpoint(func):
    """
    Decorator for endpoints: lets HTTP and toolkit errors through to their
    handlers and turns anything else into a logged 500.
    """

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (HTTPException, ImagingError):
                raise
            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
                raise HTTPException(status_code=500, detail=f"Internal server error: {e}") from e

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (HTTPException, ImagingError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {e}") from e

    return wrapper
