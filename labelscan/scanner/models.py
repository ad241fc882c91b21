"""
==============================================================================
Scanner Models Module
==============================================================================

Data model shared by the scanner, the engines and the overlay renderer.

This module defines:
- ScanStatus: outcome status codes of process_frame
- RawImage: caller-supplied pixel buffer (1 or 3 channels)
- BoundingBox: axis-aligned box in original-image pixel space
- DecodeResult: one normalized decode
- ScanOutcome: status plus ordered results of one process_frame call
- RawHit: engine-native hit before normalization

==============================================================================
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import cv2
import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .symbology import Symbology


class ScanStatus(enum.IntEnum):
    """Status codes returned by ``BarcodeScanner.process_frame``."""

    SUCCESS = 0
    NO_CODES_FOUND = 1
    PROCESSING_ERROR = 2
    INVALID_IMAGE = 3


# =============================================================================
# IMAGE
# =============================================================================

class RawImage(BaseModel):
    """
    Image description handed to the scanner.

    ``pixels`` may arrive flat (width * height * channels values) or
    already shaped; it is stored as (height, width) for one channel and
    (height, width, 3) for BGR. An empty buffer is representable so the
    scanner can report it as INVALID_IMAGE.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    channels: int
    pixels: np.ndarray

    @field_validator("channels")
    @classmethod
    def validate_channels(cls, value: int) -> int:
        if value not in (1, 3):
            raise ValueError(f"Unsupported channel count: {value}")
        return value

    @field_validator("pixels")
    @classmethod
    def validate_buffer(cls, value: np.ndarray, info: ValidationInfo) -> np.ndarray:
        """Accept a flat or shaped buffer and shape it (height, width[, 3])."""
        if value.dtype != np.uint8:
            raise ValueError(f"Pixel buffer must be uint8, got {value.dtype}")

        width = info.data.get("width")
        height = info.data.get("height")
        channels = info.data.get("channels")
        if width is None or height is None or channels is None:
            return value

        expected = width * height * channels
        if value.size != expected:
            raise ValueError(
                f"Pixel buffer has {value.size} values, expected {expected}"
            )

        shape = (height, width) if channels == 1 else (height, width, channels)
        return np.ascontiguousarray(value).reshape(shape)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RawImage":
        """
        Describe an OpenCV image.

        The buffer is copied so later caller mutation cannot leak into a scan.
        BGRA input is reduced to BGR.
        """
        array = np.asarray(array)
        if array.ndim == 3 and array.shape[2] == 4:
            array = cv2.cvtColor(array, cv2.COLOR_BGRA2BGR)
        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim == 2:
            height, width = array.shape
            channels = 1
        elif array.ndim == 3:
            height, width, channels = array.shape
        else:
            raise ValueError(f"Unsupported image shape: {array.shape}")

        return cls(
            width=width,
            height=height,
            channels=channels,
            pixels=np.ascontiguousarray(array, dtype=np.uint8).copy(),
        )

    @property
    def is_empty(self) -> bool:
        return self.pixels.size == 0

    @property
    def row_bytes(self) -> int:
        return self.width * self.channels

    @property
    def memory_size(self) -> int:
        return self.width * self.height * self.channels

    def to_gray(self) -> np.ndarray:
        """Return a grayscale working copy."""
        if self.channels == 3:
            return cv2.cvtColor(self.pixels, cv2.COLOR_BGR2GRAY)
        return self.pixels.copy()

    def to_bgr(self) -> np.ndarray:
        """Return a 3-channel copy suitable for drawing."""
        if self.channels == 1:
            return cv2.cvtColor(self.pixels, cv2.COLOR_GRAY2BGR)
        return self.pixels.copy()


# =============================================================================
# GEOMETRY
# =============================================================================

class BoundingBox(BaseModel):
    """Axis-aligned rectangle (x, y, width, height) in pixels."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def full_image(cls, width: int, height: int) -> "BoundingBox":
        return cls(x=0, y=0, width=width, height=height)

    @classmethod
    def from_points(cls, points: Iterable[Tuple[float, float]]) -> "BoundingBox":
        """
        Envelope of a polygon.

        Raises:
            ValueError: If no points are given
        """
        pts = [(float(px), float(py)) for px, py in points]
        if not pts:
            raise ValueError("Cannot build a box from zero points")
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        x0, y0 = int(round(min(xs))), int(round(min(ys)))
        x1, y1 = int(round(max(xs))), int(round(max(ys)))
        return cls(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_drawable(self) -> bool:
        return self.width > 0 and self.height > 0

    def is_inside(self, image_width: int, image_height: int) -> bool:
        """True if the box lies fully within an image of the given size."""
        return (
            self.x >= 0 and self.y >= 0
            and self.right <= image_width
            and self.bottom <= image_height
        )

    def unscaled(self, scale_x: float, scale_y: float) -> "BoundingBox":
        """Map a box from a working image scaled by (scale_x, scale_y) back to the source."""
        x0 = int(round(self.x / scale_x))
        y0 = int(round(self.y / scale_y))
        x1 = int(round(self.right / scale_x))
        y1 = int(round(self.bottom / scale_y))
        return BoundingBox(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


# =============================================================================
# RESULTS
# =============================================================================

class DecodeResult(BaseModel):
    """
    One decoded symbol in original-image coordinates.

    Attributes:
        data: Decoded payload text
        symbology: Symbology of the symbol
        location: Box in original-image pixel space
        confidence: Always 1.0, engines do not report a real confidence
        is_color_inverted: Found in the inverted pass
        format_details: Informational enrichment (check digit, content type)
        engine: Name of the engine that produced the hit
    """

    model_config = ConfigDict(frozen=True)

    data: str
    symbology: Symbology
    location: BoundingBox
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    is_color_inverted: bool = False
    format_details: Optional[str] = None
    engine: str = ""

    @property
    def symbology_name(self) -> str:
        return self.symbology.display_name

    @property
    def is_two_dimensional(self) -> bool:
        return self.symbology.is_two_dimensional


class ScanOutcome(BaseModel):
    """Status and ordered results of one ``process_frame`` call."""

    model_config = ConfigDict(frozen=True)

    status: ScanStatus
    results: Tuple[DecodeResult, ...] = ()

    @property
    def is_success(self) -> bool:
        return self.status == ScanStatus.SUCCESS

    @property
    def count_1d(self) -> int:
        return summarize(self.results)[0]

    @property
    def count_2d(self) -> int:
        return summarize(self.results)[1]

    @property
    def count_inverted(self) -> int:
        return summarize(self.results)[2]


# =============================================================================
# ENGINE HITS
# =============================================================================

@dataclass
class RawHit:
    """
    Engine-native hit, before normalization.

    ``box`` is in the coordinate space of the image the engine was given,
    already converted to a top-left origin. None means the engine reported
    no usable location.
    """

    payload: str
    format_name: str
    symbology: Optional[Symbology]
    box: Optional[BoundingBox] = None
    valid: bool = True


def summarize(results: Sequence[DecodeResult]) -> Tuple[int, int, int]:
    """Return (1D count, 2D count, inverted count)."""
    count_2d = sum(1 for r in results if r.is_two_dimensional)
    count_inverted = sum(1 for r in results if r.is_color_inverted)
    return len(results) - count_2d, count_2d, count_inverted
