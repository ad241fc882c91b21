"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the scanner.

Modules:
--------
- validators: GTIN and image path validation
- image_io: Image file load/save
- scan_report: Scan report formatting (import from the module directly)

==============================================================================
"""

from .image_io import load_image, save_image
from .validators import GTINValidator, ImagePathValidator

__all__ = [
    "GTINValidator",
    "ImagePathValidator",
    "load_image",
    "save_image",
]
