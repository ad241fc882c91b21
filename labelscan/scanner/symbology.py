"""
==============================================================================
Symbology Catalogue
==============================================================================

Every barcode standard the scanner knows about, with its display name,
its dimension class (linear "1D" or matrix/stacked "2D") and the names
each decode engine uses for it.

==============================================================================
"""

from __future__ import annotations

import enum
from typing import Dict, FrozenSet, Optional


class Symbology(str, enum.Enum):
    """
    Known barcode symbologies.

    Values are stable lowercase identifiers usable in configuration.
    """

    CODE128 = "code128"
    CODE39 = "code39"
    CODE93 = "code93"
    EAN13 = "ean13"
    EAN8 = "ean8"
    UPCA = "upca"
    UPCE = "upce"
    DATA_MATRIX = "datamatrix"
    QR_CODE = "qrcode"
    PDF417 = "pdf417"
    AZTEC = "aztec"

    @property
    def display_name(self) -> str:
        """Return human-readable display name."""
        return _DISPLAY_NAMES[self]

    @property
    def is_two_dimensional(self) -> bool:
        """True for matrix and stacked symbologies."""
        return self in TWO_D_SYMBOLOGIES

    @property
    def dimension_tag(self) -> str:
        """Short class tag used in labels and summaries."""
        return "2D" if self.is_two_dimensional else "1D"


_DISPLAY_NAMES: Dict[Symbology, str] = {
    Symbology.CODE128: "Code128",
    Symbology.CODE39: "Code39",
    Symbology.CODE93: "Code93",
    Symbology.EAN13: "EAN13",
    Symbology.EAN8: "EAN8",
    Symbology.UPCA: "UPCA",
    Symbology.UPCE: "UPCE",
    Symbology.DATA_MATRIX: "DataMatrix",
    Symbology.QR_CODE: "QR",
    Symbology.PDF417: "PDF417",
    Symbology.AZTEC: "Aztec",
}

ALL_SYMBOLOGIES: FrozenSet[Symbology] = frozenset(Symbology)

TWO_D_SYMBOLOGIES: FrozenSet[Symbology] = frozenset({
    Symbology.DATA_MATRIX,
    Symbology.QR_CODE,
    Symbology.PDF417,
    Symbology.AZTEC,
})

LINEAR_SYMBOLOGIES: FrozenSet[Symbology] = ALL_SYMBOLOGIES - TWO_D_SYMBOLOGIES

# Check-digit bearing retail codes
GTIN_SYMBOLOGIES: FrozenSet[Symbology] = frozenset({
    Symbology.EAN13,
    Symbology.EAN8,
    Symbology.UPCA,
})


# =============================================================================
# ENGINE NAME MAPPINGS
# =============================================================================

# zxing-cpp BarcodeFormat member names
ZXING_FORMAT_NAMES: Dict[Symbology, str] = {
    Symbology.CODE128: "Code128",
    Symbology.CODE39: "Code39",
    Symbology.CODE93: "Code93",
    Symbology.EAN13: "EAN13",
    Symbology.EAN8: "EAN8",
    Symbology.UPCA: "UPCA",
    Symbology.UPCE: "UPCE",
    Symbology.DATA_MATRIX: "DataMatrix",
    Symbology.QR_CODE: "QRCode",
    Symbology.PDF417: "PDF417",
    Symbology.AZTEC: "Aztec",
}

# pyzbar / zbar symbol type names (linear subset only)
ZBAR_TYPE_NAMES: Dict[Symbology, str] = {
    Symbology.CODE128: "CODE128",
    Symbology.CODE39: "CODE39",
    Symbology.CODE93: "CODE93",
    Symbology.EAN13: "EAN13",
    Symbology.EAN8: "EAN8",
    Symbology.UPCA: "UPCA",
    Symbology.UPCE: "UPCE",
}

_FROM_ZXING = {name.lower(): sym for sym, name in ZXING_FORMAT_NAMES.items()}
_FROM_ZBAR = {name.replace("-", "").lower(): sym for sym, name in ZBAR_TYPE_NAMES.items()}


def from_zxing_format(name: str) -> Optional[Symbology]:
    """
    Map a zxing-cpp format name to a Symbology.

    Accepts both bare names ("QRCode") and enum reprs
    ("BarcodeFormat.QRCode").
    """
    key = str(name).split(".")[-1].strip().lower()
    return _FROM_ZXING.get(key)


def from_zbar_type(name: str) -> Optional[Symbology]:
    """Map a zbar type name ("CODE128", "EAN-13") to a Symbology."""
    key = str(name).replace("-", "").strip().lower()
    return _FROM_ZBAR.get(key)
