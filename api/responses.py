"""
Transport adapter: send images as HTTP responses.

Both helpers fix Content-Type and Content-Length before any body byte is
sent. Prefer send_file when the image already exists on disk; send_buffer has
to encode the whole image in memory first to learn its length.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from fastapi.responses import Response, StreamingResponse

from core.constants import TransportConstants
from core.exceptions import IOFailureError
from core.image.buffer import ImageBuffer
from core.image.codec import encode
from core.image.formats import PixelFormat

logger = logging.getLogger(__name__)


def _iter_file(path: Path, chunk_size: int) -> Iterator[bytes]:
    # The handle is closed when streaming finishes, fails or is abandoned
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk


def send_file(
    path: Union[str, Path], chunk_size: int = TransportConstants.DEFAULT_CHUNK_SIZE
) -> StreamingResponse:
    """
    Stream an image file verbatim.

    Args:
        path: Image file path; its extension selects the content type
        chunk_size: Bytes read per chunk

    Returns:
        Streaming response with Content-Type and Content-Length set

    Raises:
        UnknownFormatError: If the extension is not a supported image format
        IOFailureError: If the file cannot be accessed
    """
    path = Path(path)
    pixel_format = PixelFormat.from_extension(path)

    try:
        content_length = path.stat().st_size
    except OSError as e:
        logger.error(f"Failed to stat {path}: {e}")
        raise IOFailureError(f"Failed to access {path}: {e}") from e

    logger.debug(f"Sending file {path} ({content_length} bytes)")
    return StreamingResponse(
        _iter_file(path, chunk_size),
        media_type=pixel_format.to_content_type(),
        headers={"Content-Length": str(content_length)},
    )


def send_buffer(image: ImageBuffer, pixel_format: Optional[PixelFormat] = None) -> Response:
    """
    Encode an image buffer and send it.

    Slower than send_file: the full image is encoded in memory before the
    headers go out, because Content-Length must be known up front.

    Args:
        image: Image to send
        pixel_format: Output format, defaults to the buffer's own format

    Returns:
        Response with Content-Type and Content-Length set
    """
    pixel_format = pixel_format or image.pixel_format
    content = encode(image, pixel_format)

    logger.debug(
        f"Sending {image.width}x{image.height} image as {pixel_format.codec_name} "
        f"({len(content)} bytes)"
    )
    return Response(
        content=content,
        media_type=pixel_format.to_content_type(),
        headers={"Content-Length": str(len(content))},
    )
