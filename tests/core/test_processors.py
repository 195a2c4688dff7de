"""
Tests for the progressive-halving resize engine
"""

import numpy as np
import pytest

from core.image.buffer import create, pixels_equal
from core.image.formats import PixelFormat
from core.image.processors import (
    plan_resize_steps,
    resize,
    round_half_up,
    scale_to_height,
    scale_to_width,
)


class TestResizePlan:
    """Test the sequence of intermediate sizes"""

    def test_no_steps_when_sizes_match(self):
        assert plan_resize_steps(100, 50, 100, 50) == []

    def test_downscale_halves_each_step(self):
        """Never shrinks more than 2x per pass and never overshoots the target"""
        assert plan_resize_steps(1000, 667, 100, 100) == [
            (500, 333),
            (250, 166),
            (125, 100),
            (100, 100),
        ]

    def test_upscale_is_single_step(self):
        assert plan_resize_steps(10, 10, 100, 50) == [(100, 50)]

    def test_small_downscale_is_single_step(self):
        assert plan_resize_steps(100, 100, 60, 90) == [(60, 90)]

    def test_mixed_direction(self):
        """Shrinking width while enlarging height takes as many steps as the width alone"""
        mixed = plan_resize_steps(64, 8, 8, 20)
        assert mixed == [(32, 20), (16, 20), (8, 20)]
        assert len(mixed) == len(plan_resize_steps(64, 20, 8, 20))

        transposed = plan_resize_steps(8, 64, 20, 8)
        assert transposed == [(20, 32), (20, 16), (20, 8)]

    def test_steps_never_shrink_more_than_half(self):
        width, height = 4096, 3000
        for step_width, step_height in plan_resize_steps(width, height, 3, 7):
            assert step_width >= width // 2
            assert step_height >= height // 2
            width, height = step_width, step_height


class TestResize:
    """Test resize results"""

    @pytest.mark.parametrize("fixture", ["opaque_image", "alpha_image"])
    def test_identity(self, fixture, request):
        """Resizing to the current size returns the source itself"""
        image = request.getfixturevalue(fixture)
        resized = resize(image, image.width, image.height)
        assert resized is image
        assert pixels_equal(resized, image)

    @pytest.mark.parametrize(
        "source,target,expected",
        [
            ((40, 30), (7, 5), (7, 5)),
            ((40, 30), (1, 1), (1, 1)),
            ((40, 30), (100, 90), (100, 90)),
            ((40, 30), (5, 60), (5, 60)),
            ((3, 200), (150, 2), (150, 2)),
            ((40, 30), (0, 0), (1, 1)),
            ((40, 30), (-10, 12), (1, 12)),
            ((1, 1), (9, 9), (9, 9)),
        ],
    )
    def test_convergence(self, source, target, expected):
        """Result always has exactly the (coerced) target size"""
        image = create(source[0], source[1], PixelFormat.ALPHA)
        resized = resize(image, *target)
        assert (resized.width, resized.height) == expected

    def test_keeps_source_format_by_default(self, alpha_image):
        assert resize(alpha_image, 10, 10).pixel_format is PixelFormat.ALPHA

    def test_explicit_output_format(self, alpha_image):
        resized = resize(alpha_image, 10, 10, PixelFormat.OPAQUE)
        assert resized.pixel_format is PixelFormat.OPAQUE
        assert np.all(resized.pixels >> 24 == 0xFF)

    def test_source_not_modified(self, opaque_image):
        before = opaque_image.copy()
        resize(opaque_image, 5, 5)
        assert pixels_equal(before, opaque_image)

    def test_uniform_color_preserved(self):
        image = create(640, 480, PixelFormat.OPAQUE)
        with image.create_graphics() as g:
            g.fill_rect(0, 0, 640, 480, 0xFF336699)

        resized = resize(image, 37, 23)
        assert np.all(resized.pixels == 0xFF336699)

    def test_photo_downscale(self, photo_image):
        resized = resize(photo_image, 100, 100)
        assert resized.size.as_tuple() == (100, 100)
        # The white square at (100..300, 100..300) lands around (10..30, 15..45)
        assert resized.get_pixel(20, 30) == 0xFFFFFFFF


class TestScale:
    """Test aspect-preserving scaling"""

    @pytest.mark.parametrize(
        "value,expected", [(1.5, 2), (2.5, 3), (2.49, 2), (0.5, 1), (-2.5, -2), (7.0, 7)]
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_scale_to_width(self, photo_image):
        """Height follows round(W * h0 / w0), ties rounding up"""
        scaled = scale_to_width(photo_image, 500)
        assert (scaled.width, scaled.height) == (500, 334)  # 333.5 -> 334

    def test_scale_to_height(self, photo_image):
        scaled = scale_to_height(photo_image, 100)
        assert (scaled.width, scaled.height) == (150, 100)  # 149.925 -> 150

    def test_scale_ties_round_up(self):
        assert scale_to_width(create(4, 3, PixelFormat.OPAQUE), 2).size.as_tuple() == (2, 2)
        assert scale_to_height(create(3, 4, PixelFormat.OPAQUE), 2).size.as_tuple() == (2, 2)

    def test_scale_upwards(self, opaque_image):
        scaled = scale_to_width(opaque_image, 80)
        assert (scaled.width, scaled.height) == (80, 60)

    def test_same_size_is_noop(self, opaque_image):
        assert scale_to_width(opaque_image, opaque_image.width) is opaque_image
        assert scale_to_height(opaque_image, opaque_image.height) is opaque_image

    def test_explicit_format(self, opaque_image):
        scaled = scale_to_height(opaque_image, 15, PixelFormat.ALPHA)
        assert scaled.pixel_format is PixelFormat.ALPHA
        assert scaled.size.as_tuple() == (20, 15)
