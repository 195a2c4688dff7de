"""
Pixel format model.

Two raster encodings are supported:
- OPAQUE: 24-bit RGB, written as JPEG
- ALPHA: 32-bit RGBA, written as PNG
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from core.constants import ImageConstants, TransportConstants
from core.exceptions import UnknownFormatError, UnsupportedFormatError


class PixelFormat(str, Enum):
    """Closed set of pixel layouts handled by the toolkit."""

    OPAQUE = "jpeg"
    ALPHA = "png"

    @classmethod
    def from_native_tag(cls, tag: Any) -> "PixelFormat":
        """
        Map a Pillow image mode to a pixel format.

        Args:
            tag: Pillow mode string ("RGB" or "RGBA")

        Returns:
            Matching PixelFormat

        Raises:
            UnsupportedFormatError: For any other mode
        """
        for pixel_format, native_tag in _NATIVE_TAGS.items():
            if tag == native_tag:
                return pixel_format
        raise UnsupportedFormatError(tag)

    @classmethod
    def from_extension(cls, name_or_path: Union[str, Path]) -> "PixelFormat":
        """
        Detect pixel format from the extension of a file name or path.

        Matching is case-insensitive: jpg/jpeg -> OPAQUE, png -> ALPHA.

        Raises:
            UnknownFormatError: For any other extension
        """
        # Text after the last dot of the file name; names without a dot have none
        name = Path(name_or_path).name
        extension = name.rpartition(".")[2].lower() if "." in name else ""

        if extension in ("jpg", "jpeg"):
            return cls.OPAQUE
        if extension == "png":
            return cls.ALPHA
        raise UnknownFormatError(extension or name)

    def to_native_tag(self) -> str:
        return _NATIVE_TAGS[self]

    def to_content_type(self) -> str:
        if self is PixelFormat.OPAQUE:
            return TransportConstants.CONTENT_TYPE_JPEG
        return TransportConstants.CONTENT_TYPE_PNG

    @property
    def codec_name(self) -> str:
        """Pillow codec name used for encoding."""
        return "JPEG" if self is PixelFormat.OPAQUE else "PNG"

    @property
    def extension(self) -> str:
        return "jpg" if self is PixelFormat.OPAQUE else "png"

    @property
    def has_alpha(self) -> bool:
        return self is PixelFormat.ALPHA

    def default_encode_quality(self) -> Optional[float]:
        """
        Encode quality on the [0, 1] scale.

        JPEG always requests explicit maximum quality; PNG is lossless and
        uses the encoder defaults, reported as None.
        """
        if self is PixelFormat.OPAQUE:
            return ImageConstants.JPEG_QUALITY
        return None

    def encoder_options(self) -> Dict[str, Any]:
        """
        Pillow save() keyword arguments for this format.

        Returns:
            Dictionary with format and optional quality
        """
        options: Dict[str, Any] = {"format": self.codec_name}
        quality = self.default_encode_quality()
        if quality is not None:
            options["quality"] = int(round(quality * ImageConstants.PIL_MAX_QUALITY))
        return options


_NATIVE_TAGS = {
    PixelFormat.OPAQUE: "RGB",
    PixelFormat.ALPHA: "RGBA",
}
