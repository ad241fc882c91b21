"""
==============================================================================
Model Tests
==============================================================================

Tests for images, boxes, results and the symbology catalogue.

==============================================================================
"""

import numpy as np
import pytest
from pydantic import ValidationError

from labelscan.scanner.models import (
    BoundingBox,
    DecodeResult,
    RawImage,
    ScanOutcome,
    ScanStatus,
    summarize,
)
from labelscan.scanner.symbology import (
    LINEAR_SYMBOLOGIES,
    TWO_D_SYMBOLOGIES,
    Symbology,
    from_zbar_type,
    from_zxing_format,
)


def _result(symbology=Symbology.CODE128, inverted=False, box=(0, 0, 10, 10)):
    x, y, w, h = box
    return DecodeResult(
        data="X",
        symbology=symbology,
        location=BoundingBox(x=x, y=y, width=w, height=h),
        is_color_inverted=inverted,
    )


class TestRawImage:
    """Tests for caller-supplied images."""

    def test_from_gray_array(self, gray_image):
        raw = RawImage.from_array(gray_image)
        assert (raw.width, raw.height, raw.channels) == (80, 60, 1)
        assert raw.memory_size == 80 * 60
        assert raw.row_bytes == 80

    def test_from_bgr_array_copies(self, white_image):
        raw = RawImage.from_array(white_image)
        white_image[:] = 0
        assert raw.channels == 3
        assert raw.pixels.min() == 255

    def test_from_bgra_array(self):
        bgra = np.zeros((10, 12, 4), dtype=np.uint8)
        raw = RawImage.from_array(bgra)
        assert raw.channels == 3
        assert raw.pixels.shape == (10, 12, 3)

    def test_buffer_length_must_match(self):
        with pytest.raises(ValidationError):
            RawImage(width=4, height=4, channels=1, pixels=np.zeros(10, dtype=np.uint8))

    def test_channel_count(self):
        with pytest.raises(ValidationError):
            RawImage(width=2, height=2, channels=2, pixels=np.zeros(8, dtype=np.uint8))

    def test_empty_image(self):
        raw = RawImage(width=0, height=0, channels=1, pixels=np.zeros(0, dtype=np.uint8))
        assert raw.is_empty

    def test_flat_gray_buffer_is_shaped(self):
        raw = RawImage(width=80, height=60, channels=1, pixels=np.full(4800, 255, dtype=np.uint8))
        assert raw.pixels.shape == (60, 80)
        assert raw.to_gray().shape == (60, 80)

    def test_flat_bgr_buffer_is_shaped(self):
        raw = RawImage(width=80, height=60, channels=3, pixels=np.zeros(14400, dtype=np.uint8))
        assert raw.pixels.shape == (60, 80, 3)
        assert raw.to_gray().shape == (60, 80)
        assert raw.to_bgr().shape == (60, 80, 3)

    def test_buffer_dtype_must_be_uint8(self):
        with pytest.raises(ValidationError):
            RawImage(width=2, height=2, channels=1, pixels=np.zeros(4, dtype=np.float32))

    def test_gray_and_bgr_views(self, white_image, gray_image):
        assert RawImage.from_array(white_image).to_gray().shape == (100, 100)
        assert RawImage.from_array(gray_image).to_bgr().shape == (60, 80, 3)


class TestBoundingBox:
    """Tests for box geometry."""

    def test_from_points_envelope(self):
        box = BoundingBox.from_points([(10, 12), (50, 8), (52, 40), (9, 44)])
        assert box.as_tuple() == (9, 8, 43, 36)

    def test_from_no_points(self):
        with pytest.raises(ValueError):
            BoundingBox.from_points([])

    def test_unscaled_round_trip(self):
        box = BoundingBox(x=20, y=20, width=40, height=40)
        assert box.unscaled(2.0, 2.0).as_tuple() == (10, 10, 20, 20)

    def test_unscaled_per_axis(self):
        box = BoundingBox(x=30, y=20, width=60, height=40)
        assert box.unscaled(3.0, 2.0).as_tuple() == (10, 10, 20, 20)

    def test_unscaled_box_on_edge_stays_in_frame(self):
        source_width = 101
        scale = 151 / source_width
        for x in range(0, 150):
            for width in range(1, 151 - x):
                box = BoundingBox(x=x, y=0, width=width, height=10).unscaled(scale, 1.0)
                assert box.right <= source_width

        edge = BoundingBox(x=1, y=0, width=150, height=10).unscaled(scale, 1.0)
        assert edge.right == source_width

    def test_drawable_and_inside(self):
        box = BoundingBox(x=90, y=90, width=10, height=10)
        assert box.is_drawable
        assert box.is_inside(100, 100)
        assert not box.is_inside(99, 100)
        assert not BoundingBox(x=0, y=0, width=0, height=5).is_drawable
        assert not BoundingBox(x=-1, y=0, width=5, height=5).is_inside(100, 100)

    def test_full_image(self):
        assert BoundingBox.full_image(640, 480).as_tuple() == (0, 0, 640, 480)


class TestResults:
    """Tests for decode results and outcomes."""

    def test_confidence_range(self):
        with pytest.raises(ValidationError):
            DecodeResult(
                data="X",
                symbology=Symbology.QR_CODE,
                location=BoundingBox.full_image(1, 1),
                confidence=1.5,
            )

    def test_default_confidence(self):
        assert _result().confidence == 1.0

    def test_summary_counts(self):
        results = [
            _result(Symbology.CODE128),
            _result(Symbology.QR_CODE),
            _result(Symbology.PDF417, inverted=True),
            _result(Symbology.EAN13, inverted=True),
        ]
        assert summarize(results) == (2, 2, 2)

        outcome = ScanOutcome(status=ScanStatus.SUCCESS, results=tuple(results))
        assert outcome.is_success
        assert (outcome.count_1d, outcome.count_2d, outcome.count_inverted) == (2, 2, 2)

    def test_status_values(self):
        assert [s.value for s in ScanStatus] == [0, 1, 2, 3]


class TestSymbologyCatalogue:
    """Tests for symbology metadata and engine name mapping."""

    def test_dimension_classes_partition(self):
        assert not (LINEAR_SYMBOLOGIES & TWO_D_SYMBOLOGIES)
        assert LINEAR_SYMBOLOGIES | TWO_D_SYMBOLOGIES == frozenset(Symbology)

    def test_display_names(self):
        assert Symbology.QR_CODE.display_name == "QR"
        assert Symbology.DATA_MATRIX.display_name == "DataMatrix"
        assert Symbology.AZTEC.dimension_tag == "2D"
        assert Symbology.UPCE.dimension_tag == "1D"

    @pytest.mark.parametrize("name, expected", [
        ("QRCode", Symbology.QR_CODE),
        ("BarcodeFormat.Code128", Symbology.CODE128),
        ("DataMatrix", Symbology.DATA_MATRIX),
        ("MaxiCode", None),
    ])
    def test_from_zxing_format(self, name, expected):
        assert from_zxing_format(name) is expected

    @pytest.mark.parametrize("name, expected", [
        ("CODE128", Symbology.CODE128),
        ("EAN-13", Symbology.EAN13),
        ("UPCA", Symbology.UPCA),
        ("QRCODE", None),
    ])
    def test_from_zbar_type(self, name, expected):
        assert from_zbar_type(name) is expected
