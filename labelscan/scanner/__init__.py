"""
==============================================================================
Scanner Package - Barcode Detection
==============================================================================

Multi-engine barcode scanning with OpenCV preprocessing, zxing-cpp,
libdmtx and zbar.

Classes:
--------
- BarcodeScanner: Frame processing entry point
- FrameSession: Frame sequence lifecycle gate
- ScanSettings: Symbology and scan parameter configuration

==============================================================================
"""

from .core import BarcodeScanner
from .models import BoundingBox, DecodeResult, RawImage, ScanOutcome, ScanStatus
from .overlay import compute_overlay_geometry, render_overlays
from .preprocessing import BASELINE, ENHANCED, PreprocessingProfile, profile_for_preset_name
from .session import FrameSession
from .settings import (
    ScanPreset,
    ScanSettings,
    configure_for_low_resolution,
    configure_for_shipping_labels,
    configure_from_preset_name,
    create_scan_settings,
)
from .symbology import Symbology

__all__ = [
    "BarcodeScanner",
    "BoundingBox",
    "DecodeResult",
    "RawImage",
    "ScanOutcome",
    "ScanStatus",
    "compute_overlay_geometry",
    "render_overlays",
    "BASELINE",
    "ENHANCED",
    "PreprocessingProfile",
    "profile_for_preset_name",
    "FrameSession",
    "ScanPreset",
    "ScanSettings",
    "configure_for_low_resolution",
    "configure_for_shipping_labels",
    "configure_from_preset_name",
    "create_scan_settings",
    "Symbology",
]
