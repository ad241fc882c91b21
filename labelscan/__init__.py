"""
==============================================================================
Label Barcode Scanner
==============================================================================

Barcode recognition for shipping-label photographs: low-resolution
preprocessing, multi-engine decoding (zxing-cpp, libdmtx, zbar) with a
color-inverted pass, and bounds-safe overlay rendering.

==============================================================================
"""

__version__ = "1.0.0"
