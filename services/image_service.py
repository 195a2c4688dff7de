"""
Image Service - Business logic for stored image operations.

This service resolves image names inside a storage directory and applies
crop, rotation, resize and format conversion to them.
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

from core.exceptions import ImageNotFoundError, InvalidArgumentError, UnknownFormatError
from core.image import codec
from core.image.buffer import ImageBuffer, ImageSize
from core.image.formats import PixelFormat
from core.image.geometry import rotate_quadrant, subimage
from core.image.processors import resize, scale_to_height, scale_to_width
from schemas import TransformRequest

logger = logging.getLogger(__name__)


class ImageService:
    """
    Service for operations on images kept in a storage directory.

    Image names are relative paths; names that escape the storage directory
    are treated as missing.
    """

    def __init__(self, storage_path: Union[str, Path]):
        """
        Initialize image service.

        Args:
            storage_path: Directory holding the images, created if missing
        """
        self.storage_path = Path(storage_path).resolve()
        self.storage_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Image service using storage: {self.storage_path}")

    def _storage_path_for(self, name: str) -> Path:
        path = (self.storage_path / name).resolve()
        if path == self.storage_path or self.storage_path not in path.parents:
            raise ImageNotFoundError(name)
        return path

    def resolve(self, name: str) -> Path:
        """
        Get path of an existing stored image.

        Raises:
            ImageNotFoundError: If the name escapes storage or the file is missing
        """
        path = self._storage_path_for(name)
        if not path.is_file():
            raise ImageNotFoundError(name)
        return path

    def list_images(self) -> List[str]:
        """List stored images with a supported extension."""
        names = []
        for path in sorted(self.storage_path.rglob("*")):
            if not path.is_file():
                continue
            try:
                PixelFormat.from_extension(path)
            except UnknownFormatError:
                continue
            names.append(path.relative_to(self.storage_path).as_posix())
        return names

    def get_size(self, name: str) -> Tuple[ImageSize, PixelFormat]:
        """Read size from the file header without decoding pixels."""
        path = self.resolve(name)
        pixel_format = PixelFormat.from_extension(path)
        return codec.probe_size(path), pixel_format

    def load(self, name: str) -> ImageBuffer:
        return codec.load(self.resolve(name))

    def save(self, image: ImageBuffer, name: str) -> Path:
        """
        Store image under name; the extension selects the format.

        Raises:
            InvalidArgumentError: If the name escapes the storage directory
        """
        try:
            path = self._storage_path_for(name)
        except ImageNotFoundError as e:
            raise InvalidArgumentError(f"Invalid image name: {name}") from e
        return codec.save(image, path)

    def transform(self, name: str, request: TransformRequest) -> Tuple[ImageBuffer, PixelFormat]:
        """
        Apply the requested operations to a stored image.

        Args:
            name: Stored image name
            request: Operations to apply

        Returns:
            Tuple of (resulting image, output format)
        """
        image = self.load(name)
        output_format = request.format or image.pixel_format

        if request.crop is not None:
            crop = request.crop
            image = subimage(image, crop.x, crop.y, crop.width, crop.height)

        if request.rotate is not None:
            image = rotate_quadrant(image, request.rotate)

        if request.resize is not None:
            image = resize(image, request.resize.width, request.resize.height, output_format)
        elif request.scale_to_width is not None:
            image = scale_to_width(image, request.scale_to_width, output_format)
        elif request.scale_to_height is not None:
            image = scale_to_height(image, request.scale_to_height, output_format)

        if request.save_as:
            self.save(image, request.save_as)

        logger.info(
            f"Transformed {name} -> {image.width}x{image.height} {output_format.codec_name}"
        )
        return image, output_format
