"""
==============================================================================
End-to-End Scanner Tests
==============================================================================

Real-engine scans of a synthetic label holding one Code128 and one QR
code. Skipped when zxing-cpp is not installed.

==============================================================================
"""

import cv2
import numpy as np
import pytest

from labelscan.scanner import (
    BASELINE,
    ENHANCED,
    BarcodeScanner,
    FrameSession,
    ScanStatus,
    Symbology,
    create_scan_settings,
)

zxingcpp = pytest.importorskip("zxingcpp")


CODE128_TEXT = "LABEL-12345"
QR_TEXT = "https://example.com/track/42"
MODULE_PX = 2
MARGIN = 30


def render_symbol(text: str, format_name: str, min_height: int = 60) -> np.ndarray:
    """Render a symbol with zxing-cpp's writer at MODULE_PX pixels per module."""
    fmt = getattr(zxingcpp.BarcodeFormat, format_name)
    bitmap = zxingcpp.create_barcode(text, fmt).to_image(scale=1)

    symbol = np.array(bitmap, dtype=np.uint8)
    if symbol.ndim == 3:
        symbol = symbol[:, :, 0]

    symbol = cv2.resize(symbol, None, fx=MODULE_PX, fy=MODULE_PX, interpolation=cv2.INTER_NEAREST)
    if symbol.shape[0] < min_height:
        symbol = cv2.resize(symbol, (symbol.shape[1], min_height), interpolation=cv2.INTER_NEAREST)
    return cv2.copyMakeBorder(symbol, 10, 10, 10, 10, cv2.BORDER_CONSTANT, value=255)


@pytest.fixture(scope="module")
def label_image() -> np.ndarray:
    """White BGR label with a Code128 on the left and a QR code on the right."""
    linear = render_symbol(CODE128_TEXT, "Code128")
    matrix = render_symbol(QR_TEXT, "QRCode")

    height = max(linear.shape[0], matrix.shape[0]) + 2 * MARGIN + 60
    width = linear.shape[1] + matrix.shape[1] + 3 * MARGIN
    canvas = np.full((height, width), 255, dtype=np.uint8)

    top = MARGIN + 60
    canvas[top:top + linear.shape[0], MARGIN:MARGIN + linear.shape[1]] = linear
    left = 2 * MARGIN + linear.shape[1]
    canvas[top:top + matrix.shape[0], left:left + matrix.shape[1]] = matrix
    return cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)


@pytest.fixture
def label_settings():
    settings = create_scan_settings()
    settings.set_symbology_enabled(Symbology.CODE128, True)
    settings.set_symbology_enabled(Symbology.QR_CODE, True)
    settings.set_max_codes_per_frame(10)
    settings.set_search_whole_image(True)
    settings.set_try_harder_mode(True)
    return settings


def _scan(image, settings, profile):
    with FrameSession() as session:
        scanner = BarcodeScanner(session, settings, profile=profile)
        with session.frame_sequence():
            outcome = scanner.process_frame(image)
        annotated = scanner.annotate(image)
    return outcome, annotated


def _assert_found_both(outcome, image):
    height, width = image.shape[:2]

    assert outcome.status == ScanStatus.SUCCESS
    assert len(outcome.results) >= 2

    linear = [r for r in outcome.results if r.symbology == Symbology.CODE128]
    matrix = [r for r in outcome.results if r.symbology == Symbology.QR_CODE]
    assert linear and matrix
    assert any(r.data == CODE128_TEXT for r in linear)
    assert any(r.data == QR_TEXT for r in matrix)

    for result in linear + matrix:
        assert result.location.is_drawable
        assert result.location.is_inside(width, height)
        assert not result.is_color_inverted


class TestEndToEnd:
    """Tests with real decode engines."""

    def test_enhanced_profile(self, label_image, label_settings):
        outcome, annotated = _scan(label_image, label_settings, ENHANCED)
        _assert_found_both(outcome, label_image)
        assert annotated.shape == label_image.shape

    def test_baseline_profile(self, label_image, label_settings):
        outcome, _ = _scan(label_image, label_settings, BASELINE)
        _assert_found_both(outcome, label_image)

    def test_qr_box_is_near_symbol(self, label_image, label_settings):
        outcome, _ = _scan(label_image, label_settings, BASELINE)
        qr = next(r for r in outcome.results if r.symbology == Symbology.QR_CODE)
        # The QR code sits in the right half of the label
        assert qr.location.x > label_image.shape[1] // 2 - MARGIN
