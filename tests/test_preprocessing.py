"""
==============================================================================
Preprocessing Tests
==============================================================================

Tests for preprocessing stages and profile descriptors.

==============================================================================
"""

import numpy as np
import pytest

from labelscan.scanner import preprocessing
from labelscan.scanner.preprocessing import (
    BASELINE,
    ENHANCED,
    PreprocessingProfile,
    PreprocessingStage,
    profile_for_preset_name,
    scale_image,
)


class TestProfiles:
    """Tests for profile descriptors."""

    def test_baseline_descriptor(self):
        assert BASELINE.stages == ()
        assert BASELINE.scale_ladder == (1.0,)
        assert BASELINE.use_linear_engine is False

    def test_enhanced_descriptor(self):
        names = [stage.name for stage in ENHANCED.stages]
        assert names == ["upscale", "clahe", "denoise", "unsharp", "adaptive_threshold", "closing"]
        assert ENHANCED.scale_ladder == (1.0, 1.5, 2.0)
        assert ENHANCED.use_linear_engine is True

    def test_profile_for_preset_name(self):
        assert profile_for_preset_name("shipping_label") is BASELINE
        assert profile_for_preset_name("low_resolution") is ENHANCED
        with pytest.raises(KeyError):
            profile_for_preset_name("unknown")

    def test_baseline_returns_unmodified_copy(self, gray_image):
        working = BASELINE.run(gray_image)
        assert working is not gray_image
        np.testing.assert_array_equal(working, gray_image)

    def test_enhanced_upscales_and_binarizes(self, gray_image):
        original = gray_image.copy()
        working = ENHANCED.run(gray_image)

        assert working.shape == (gray_image.shape[0] * 2, gray_image.shape[1] * 2)
        assert working.dtype == np.uint8
        assert set(np.unique(working)) <= {0, 255}
        np.testing.assert_array_equal(gray_image, original)

    def test_stages_run_in_order(self, gray_image):
        order = []

        def record(name):
            def apply(image):
                order.append(name)
                return image
            return apply

        profile = PreprocessingProfile(
            name="recording",
            stages=tuple(PreprocessingStage(n, record(n)) for n in ("a", "b", "c")),
            scale_ladder=(1.0,),
            use_linear_engine=False,
        )
        profile.run(gray_image)
        assert order == ["a", "b", "c"]


class TestStages:
    """Tests for individual transforms."""

    def test_upscale_doubles(self, gray_image):
        assert preprocessing.upscale(gray_image).shape == (120, 160)

    def test_sharpen_stays_in_range(self):
        image = np.zeros((40, 40), dtype=np.uint8)
        image[:, 20:] = 255
        sharpened = preprocessing.sharpen(image)
        assert sharpened.dtype == np.uint8
        assert sharpened[:, :15].max() == 0
        assert sharpened[:, 25:].min() == 255

    def test_sharpen_keeps_flat_regions(self):
        image = np.full((30, 30), 128, dtype=np.uint8)
        np.testing.assert_array_equal(preprocessing.sharpen(image), image)

    def test_close_speckles_fills_single_pixel_holes(self):
        image = np.full((20, 20), 255, dtype=np.uint8)
        image[10, 10] = 0
        assert preprocessing.close_speckles(image)[10, 10] == 255

    def test_binarize_output_is_binary(self, gray_image):
        assert set(np.unique(preprocessing.binarize(gray_image))) <= {0, 255}


class TestScaleImage:
    """Tests for scale ladder resizing."""

    def test_unit_scale_is_identity(self, gray_image):
        assert scale_image(gray_image, 1.0) is gray_image

    @pytest.mark.parametrize("scale, expected", [(1.5, (90, 120)), (2.0, (120, 160))])
    def test_scaled_shape(self, gray_image, scale, expected):
        assert scale_image(gray_image, scale).shape == expected
