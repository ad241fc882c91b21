"""
==============================================================================
Result Enrichment Module
==============================================================================

Informational notes attached to decode results as ``format_details``.
Nothing here affects whether a result is kept.

- EAN13 / EAN8 / UPCA: GTIN check digit note
- QR / DataMatrix: content classification (URL, vCard, WiFi, GS1, text)
- everything else: "Standard format"

==============================================================================
"""

from __future__ import annotations

import re
from typing import List

from labelscan.utils.validators import GTINValidator

from .symbology import GTIN_SYMBOLOGIES, Symbology


STANDARD_FORMAT = "Standard format"
INVALID_GTIN = "Invalid GTIN"

_GS1_PREFIXES = ("(01)", "(10)", "(21)")
_GS1_FIELD = re.compile(r"\((\d{2,4})\)([^(]*)")

_gtin_validator = GTINValidator()


def parse_gtin(data: str) -> str:
    """Describe a GTIN payload and whether its check digit matches."""
    is_valid, check_digit, error = _gtin_validator.validate(data)
    if error:
        return INVALID_GTIN
    return "\n".join([
        f"GTIN: {data}",
        f"Check Digit: {check_digit}",
        f"Valid: {'Yes' if is_valid else 'No'}",
    ])


def _vcard_fields(data: str) -> List[str]:
    lines = []
    for line in data.splitlines():
        line = line.strip()
        if line.startswith("FN:"):
            lines.append(f"Name: {line[3:]}")
        elif line.startswith("TEL:"):
            lines.append(f"Phone: {line[4:]}")
        elif line.startswith("EMAIL:"):
            lines.append(f"Email: {line[6:]}")
    return lines


def _wifi_fields(data: str) -> List[str]:
    lines = []
    for field in data[len("WIFI:"):].split(";"):
        if field.startswith("S:"):
            lines.append(f"SSID: {field[2:]}")
        elif field.startswith("T:"):
            lines.append(f"Security: {field[2:]}")
        elif field.startswith("P:"):
            lines.append(f"Password: {field[2:]}")
    return lines


def classify_matrix_payload(data: str, symbology: Symbology = Symbology.QR_CODE) -> str:
    """
    Lightweight content classification for matrix payloads.

    Example:
        >>> print(classify_matrix_payload("https://example.com"))
        QR Code Data:
        Type: URL
        URL: https://example.com
    """
    header = "DataMatrix Content:" if symbology == Symbology.DATA_MATRIX else "QR Code Data:"
    lines = [header]

    if data.startswith(("http://", "https://")):
        lines += ["Type: URL", f"URL: {data}"]
    elif "BEGIN:VCARD" in data:
        lines += ["Type: vCard"] + _vcard_fields(data)
    elif data.startswith("WIFI:"):
        lines += ["Type: WiFi Configuration"] + _wifi_fields(data)
    elif data.startswith(_GS1_PREFIXES):
        lines.append("Type: GS1")
        lines += [f"AI {ai}: {value}" for ai, value in _GS1_FIELD.findall(data)]
    else:
        lines += ["Type: Text", f"Content: {data}"]

    return "\n".join(lines)


def format_details_for(symbology: Symbology, data: str) -> str:
    """Pick the enrichment note for a symbology."""
    if symbology in GTIN_SYMBOLOGIES:
        return parse_gtin(data)
    if symbology in (Symbology.QR_CODE, Symbology.DATA_MATRIX):
        return classify_matrix_payload(data, symbology)
    return STANDARD_FORMAT
