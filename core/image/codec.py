"""
Image codec adapter on top of Pillow.

Reads and writes JPEG and PNG files and streams:
- decode / load: materialize pixels in the packed layout of a pixel format
- encode / save: write with the format's encoder options
- probe_size: read dimensions from the header only
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image, UnidentifiedImageError

from core.exceptions import IOFailureError
from core.image.buffer import ImageBuffer, ImageSize
from core.image.converters import convert, from_pil, to_pil
from core.image.formats import PixelFormat

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, BinaryIO]
PathLike = Union[str, Path]

# Enough bytes for every plugin signature check
_HEADER_PREFIX_SIZE = 16


def _as_stream(source: ImageSource) -> BinaryIO:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(source)
    return source


def decode(source: ImageSource, pixel_format: PixelFormat) -> ImageBuffer:
    """
    Decode image bytes or stream into a buffer of the given format.

    Args:
        source: Encoded bytes or a readable binary stream (left open)
        pixel_format: Layout the pixels are materialized in

    Returns:
        Decoded image buffer

    Raises:
        IOFailureError: If the data cannot be read or decoded
    """
    try:
        with Image.open(_as_stream(source)) as pil_image:
            pil_image.load()
            return from_pil(pil_image, pixel_format)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.error(f"Failed to decode image: {e}")
        raise IOFailureError(f"Failed to decode image: {e}") from e


def encode(image: ImageBuffer, pixel_format: Optional[PixelFormat] = None) -> bytes:
    """
    Encode image buffer to bytes.

    Args:
        image: Source buffer
        pixel_format: Output format, defaults to the buffer's own format.
            Buffers of the other format are converted first.

    Returns:
        Encoded image bytes
    """
    buffer = io.BytesIO()
    write(image, buffer, pixel_format)
    return buffer.getvalue()


def write(
    image: ImageBuffer, stream: BinaryIO, pixel_format: Optional[PixelFormat] = None
) -> None:
    """
    Encode image buffer into a writable binary stream (left open).

    Raises:
        IOFailureError: If encoding or writing fails
    """
    pixel_format = pixel_format or image.pixel_format
    if image.pixel_format != pixel_format:
        image = convert(image, pixel_format)

    try:
        to_pil(image).save(stream, **pixel_format.encoder_options())
        stream.flush()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to encode image as {pixel_format.codec_name}: {e}")
        raise IOFailureError(f"Failed to encode image: {e}") from e


def load(path: PathLike, pixel_format: Optional[PixelFormat] = None) -> ImageBuffer:
    """
    Load image from file.

    Args:
        path: Image file path
        pixel_format: Layout to load into, detected from the extension if not given

    Returns:
        Decoded image buffer

    Raises:
        UnknownFormatError: If format is not given and the extension is unknown
        IOFailureError: If the file cannot be opened or decoded
    """
    path = Path(path)
    pixel_format = pixel_format or PixelFormat.from_extension(path)

    try:
        with open(path, "rb") as f:
            return decode(f, pixel_format)
    except IOFailureError:
        raise
    except OSError as e:
        logger.error(f"Failed to open {path}: {e}")
        raise IOFailureError(f"Failed to open {path}: {e}") from e


def save(image: ImageBuffer, path: PathLike, pixel_format: Optional[PixelFormat] = None) -> Path:
    """
    Save image to file, creating parent directories.

    Args:
        image: Source buffer
        path: Destination file path
        pixel_format: Output format, detected from the extension if not given

    Returns:
        Path written

    Raises:
        UnknownFormatError: If format is not given and the extension is unknown
        IOFailureError: If the file cannot be written
    """
    path = Path(path)
    pixel_format = pixel_format or PixelFormat.from_extension(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            write(image, f, pixel_format)
    except IOFailureError:
        raise
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise IOFailureError(f"Failed to write {path}: {e}") from e

    logger.info(f"Saved {image.width}x{image.height} {pixel_format.codec_name} image to {path}")
    return path


def probe_size(source: Union[ImageSource, PathLike]) -> ImageSize:
    """
    Get image size without loading the image.

    Only the header is parsed; pixel data is never decoded.

    Args:
        source: Encoded bytes, a readable binary stream, or a file path

    Returns:
        Image dimensions

    Raises:
        IOFailureError: If the header cannot be read
    """
    try:
        if isinstance(source, (str, Path)):
            with open(source, "rb") as f:
                return _read_header_size(f)
        return _read_header_size(_as_stream(source))
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Failed to read image header: {e}")
        raise IOFailureError(f"Failed to read image header: {e}") from e


def _read_header_size(stream: BinaryIO) -> ImageSize:
    # Format plugins parse the header only and skip Image.open's pixel count limit
    Image.preinit()
    start = stream.tell()
    prefix = stream.read(_HEADER_PREFIX_SIZE)

    for pixel_format in PixelFormat:
        factory, accept = Image.OPEN[pixel_format.codec_name]
        if accept is not None and not accept(prefix):
            continue

        stream.seek(start)
        try:
            with factory(stream) as pil_image:
                width, height = pil_image.size
        except SyntaxError as e:
            raise UnidentifiedImageError(f"Invalid {pixel_format.codec_name} header: {e}") from e
        return ImageSize(width, height)

    raise UnidentifiedImageError("Cannot identify image file")


class ImageCodec:
    """Encode, decode and size-probing operations."""

    decode = staticmethod(decode)
    encode = staticmethod(encode)
    write = staticmethod(write)
    load = staticmethod(load)
    save = staticmethod(save)
    probe_size = staticmethod(probe_size)
