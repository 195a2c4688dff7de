"""
Tests for the Pillow codec adapter
"""

import io

import pytest

from core.exceptions import IOFailureError, UnknownFormatError
from core.image import codec
from core.image.buffer import ImageSize, pixels_equal
from core.image.formats import PixelFormat

JPEG_SOS = b"\xff\xda"
JPEG_SOF0 = b"\xff\xc0"


@pytest.fixture
def corrupt_jpeg(photo_jpeg) -> bytes:
    """Valid 1000x667 JPEG header followed by garbage instead of scan data"""
    sos = photo_jpeg.index(JPEG_SOS)
    segment_length = int.from_bytes(photo_jpeg[sos + 2 : sos + 4], "big")
    header_end = sos + 2 + segment_length
    return photo_jpeg[:header_end] + b"\x00" * 512


@pytest.fixture
def huge_jpeg(opaque_image) -> bytes:
    """Small JPEG whose frame header claims 15000x15000 pixels"""
    data = bytearray(codec.encode(opaque_image, PixelFormat.OPAQUE))
    sof = data.index(JPEG_SOF0)
    # marker, length, precision, then height and width
    data[sof + 5 : sof + 7] = (15000).to_bytes(2, "big")
    data[sof + 7 : sof + 9] = (15000).to_bytes(2, "big")
    return bytes(data)


class TestEncodeDecode:
    """Test in-memory encoding and decoding"""

    def test_png_is_lossless(self, alpha_image):
        data = codec.encode(alpha_image)
        assert data.startswith(b"\x89PNG")
        assert pixels_equal(codec.decode(data, PixelFormat.ALPHA), alpha_image)

    def test_jpeg_round_trip(self, photo_image, photo_jpeg):
        assert photo_jpeg.startswith(b"\xff\xd8")
        decoded = codec.decode(photo_jpeg, PixelFormat.OPAQUE)
        assert decoded.pixel_format is PixelFormat.OPAQUE
        assert decoded.size == photo_image.size

    def test_jpeg_maximum_quality(self, photo_image, photo_jpeg):
        """Flat areas survive JPEG at quality 1.0 nearly unchanged"""
        decoded = codec.decode(photo_jpeg, PixelFormat.OPAQUE)
        pixel = decoded.get_pixel(200, 200)
        for shift in (16, 8, 0):
            assert abs(((pixel >> shift) & 0xFF) - 0xFF) <= 2

    def test_encode_converts_format(self, alpha_image):
        data = codec.encode(alpha_image, PixelFormat.OPAQUE)
        assert data.startswith(b"\xff\xd8")

    def test_decode_into_other_format(self, alpha_image):
        decoded = codec.decode(codec.encode(alpha_image), PixelFormat.OPAQUE)
        assert decoded.pixel_format is PixelFormat.OPAQUE
        assert decoded.size == alpha_image.size

    def test_decode_from_stream(self, alpha_image):
        stream = io.BytesIO(codec.encode(alpha_image))
        assert pixels_equal(codec.decode(stream, PixelFormat.ALPHA), alpha_image)
        assert not stream.closed

    def test_decode_garbage(self):
        with pytest.raises(IOFailureError):
            codec.decode(b"definitely not an image", PixelFormat.OPAQUE)

    def test_decode_corrupt_pixel_data(self, corrupt_jpeg):
        with pytest.raises(IOFailureError):
            codec.decode(corrupt_jpeg, PixelFormat.OPAQUE)

    def test_decode_over_pixel_limit(self, huge_jpeg):
        with pytest.raises(IOFailureError):
            codec.decode(huge_jpeg, PixelFormat.OPAQUE)


class TestFiles:
    """Test load and save"""

    def test_save_creates_parent_directories(self, tmp_path, alpha_image):
        path = tmp_path / "a" / "b" / "logo.png"
        assert codec.save(alpha_image, path) == path
        assert path.is_file()

    def test_load_detects_format(self, tmp_path, alpha_image):
        codec.save(alpha_image, tmp_path / "logo.png")
        loaded = codec.load(tmp_path / "logo.png")
        assert loaded.pixel_format is PixelFormat.ALPHA
        assert pixels_equal(loaded, alpha_image)

    def test_save_format_from_extension(self, tmp_path, alpha_image):
        path = tmp_path / "photo.JPG"
        codec.save(alpha_image, path)
        assert path.read_bytes().startswith(b"\xff\xd8")
        assert codec.load(str(path)).pixel_format is PixelFormat.OPAQUE

    def test_explicit_format(self, tmp_path, opaque_image):
        path = tmp_path / "photo.jpg"
        codec.save(opaque_image, path)
        assert codec.load(path, PixelFormat.ALPHA).pixel_format is PixelFormat.ALPHA

    def test_unknown_extension(self, tmp_path, opaque_image):
        with pytest.raises(UnknownFormatError):
            codec.save(opaque_image, tmp_path / "photo.gif")
        with pytest.raises(UnknownFormatError):
            codec.load(tmp_path / "photo.gif")
        assert not (tmp_path / "photo.gif").exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(IOFailureError) as exc_info:
            codec.load(tmp_path / "missing.jpg")
        assert isinstance(exc_info.value, OSError)


class TestProbeSize:
    """Test header-only size probing"""

    def test_from_bytes(self, photo_jpeg):
        assert codec.probe_size(photo_jpeg) == ImageSize(1000, 667)

    def test_from_stream(self, photo_jpeg):
        assert codec.probe_size(io.BytesIO(photo_jpeg)) == ImageSize(1000, 667)

    def test_from_path(self, tmp_path, photo_jpeg, alpha_image):
        (tmp_path / "photo.jpg").write_bytes(photo_jpeg)
        assert codec.probe_size(tmp_path / "photo.jpg") == ImageSize(1000, 667)

        codec.save(alpha_image, tmp_path / "logo.png")
        assert codec.probe_size(str(tmp_path / "logo.png")) == ImageSize(40, 30)

    def test_pixel_data_not_decoded(self, corrupt_jpeg):
        """Correct size from a file whose pixel data is garbage"""
        assert codec.probe_size(corrupt_jpeg) == ImageSize(1000, 667)

    def test_over_pixel_limit(self, huge_jpeg, tmp_path):
        """Size of an image too large to decode is still read from its header"""
        assert codec.probe_size(huge_jpeg) == ImageSize(15000, 15000)

        (tmp_path / "huge.jpg").write_bytes(huge_jpeg)
        assert codec.probe_size(tmp_path / "huge.jpg") == ImageSize(15000, 15000)

    def test_stream_left_open(self, photo_jpeg):
        stream = io.BytesIO(photo_jpeg)
        codec.probe_size(stream)
        assert not stream.closed

    def test_truncated_header(self, photo_jpeg):
        with pytest.raises(IOFailureError):
            codec.probe_size(photo_jpeg[:40])

    def test_invalid_header(self):
        with pytest.raises(IOFailureError):
            codec.probe_size(b"\x00" * 64)
