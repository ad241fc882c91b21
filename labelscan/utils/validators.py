"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for decoded payloads and command-line input.

This module implements:
- GTINValidator: Validates retail GTIN payloads (EAN-8, UPC-A, EAN-13)
- ImagePathValidator: Validates the image path given on the command line

GTIN Check Digit (GS1 mod-10):
------------------------------
- Weights alternate 3, 1, 3, ... starting from the digit nearest the
  check digit and moving left
- Check digit = (10 - weighted_sum % 10) % 10

==============================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple


class GTINValidator:
    """
    Validator for GTIN payloads.

    Example:
        >>> validator = GTINValidator()
        >>> is_valid, check_digit, error = validator.validate("4006381333931")
        >>> print(is_valid, check_digit)
        True 1
    """

    MIN_LENGTH = 8
    MAX_LENGTH = 14

    @staticmethod
    def compute_check_digit(body: str) -> int:
        """
        Compute the GS1 check digit for the digits preceding it.

        Args:
            body: All digits except the check digit
        """
        total = 0
        for position, char in enumerate(reversed(body)):
            weight = 3 if position % 2 == 0 else 1
            total += int(char) * weight
        return (10 - total % 10) % 10

    def validate(self, gtin: str) -> Tuple[bool, Optional[int], Optional[str]]:
        """
        Validate a GTIN check digit.

        Args:
            gtin: Decoded payload

        Returns:
            Tuple of (is_valid, computed_check_digit, error_message)
            - Well-formed: (matches, digit, None)
            - Malformed: (False, None, "Error description")
        """
        if not gtin:
            return False, None, "GTIN is required"

        gtin = gtin.strip()

        if len(gtin) < self.MIN_LENGTH:
            return False, None, f"GTIN must be at least {self.MIN_LENGTH} digits"

        if len(gtin) > self.MAX_LENGTH:
            return False, None, f"GTIN must be at most {self.MAX_LENGTH} digits"

        if not gtin.isdigit():
            return False, None, "GTIN must contain only digits"

        check_digit = self.compute_check_digit(gtin[:-1])
        return check_digit == int(gtin[-1]), check_digit, None

    def is_valid(self, gtin: str) -> bool:
        """Quick validation check."""
        is_valid, _, _ = self.validate(gtin)
        return is_valid


class ImagePathValidator:
    """
    Validator for the input image path.

    Only checks that the path names an existing file; whether it decodes
    as an image is left to the image codec.
    """

    def validate(self, path: str) -> Tuple[bool, Optional[str]]:
        """
        Validate an image path.

        Args:
            path: Path given on the command line

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not path or not path.strip():
            return False, "Image path is required"

        candidate = Path(path.strip())

        if not candidate.exists():
            return False, f"File not found: {candidate}"

        if not candidate.is_file():
            return False, f"Not a file: {candidate}"

        return True, None

    def is_valid(self, path: str) -> bool:
        """Quick validation check."""
        is_valid, _ = self.validate(path)
        return is_valid
