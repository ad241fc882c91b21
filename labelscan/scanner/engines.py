"""
==============================================================================
Decode Engine Adapters
==============================================================================

One adapter per external decode library, all behind ``DecodeEngine``:

- ZXingEngine: general multi-symbology decoder (zxing-cpp)
- DataMatrixEngine: region-based DataMatrix decoder (pylibdmtx / libdmtx)
- ZBarLinearEngine: dedicated 1D decoder (pyzbar / zbar)

Each adapter owns its library's quirks: option names, result caps, time
budgets and coordinate conventions. Boxes leave an adapter in the
top-left-origin pixel space of the image the adapter was given.

A library that cannot be imported (missing wheel or missing shared
library) leaves its adapter unavailable; calling it raises
ENGINE_UNAVAILABLE, which the orchestrator absorbs.

==============================================================================
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, FrozenSet, List, Optional

import numpy as np

from labelscan.core import exceptions

from .models import BoundingBox, RawHit
from .settings import ScanSettings
from .symbology import (
    LINEAR_SYMBOLOGIES,
    ZBAR_TYPE_NAMES,
    ZXING_FORMAT_NAMES,
    Symbology,
    from_zbar_type,
    from_zxing_format,
)

# ------------------------------ Backend imports ------------------------------
try:
    import zxingcpp  # type: ignore
except ImportError:  # pragma: no cover
    zxingcpp = None

try:
    from pylibdmtx.pylibdmtx import decode as dmtx_decode  # type: ignore
except ImportError:  # pragma: no cover
    dmtx_decode = None

try:
    from pyzbar.pyzbar import ZBarSymbol, decode as zbar_decode  # type: ignore
except ImportError:  # pragma: no cover
    ZBarSymbol = None
    zbar_decode = None


# Module logger
logger = logging.getLogger(__name__)


def _payload_text(data: Any) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return str(data)


class DecodeEngine(ABC):
    """
    Decode capability: ``decode(image, filter) -> [RawHit]``.

    Attributes:
        name: Engine name used in logs and results
        supported: Symbologies the engine can report
    """

    name: str = "engine"
    supported: FrozenSet[Symbology] = frozenset()

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether the backing library is importable."""

    def filter_for(self, enabled: FrozenSet[Symbology]) -> FrozenSet[Symbology]:
        """Enabled symbologies this engine should be asked for."""
        return self.supported & enabled

    @abstractmethod
    def decode(
        self,
        image: np.ndarray,
        symbologies: FrozenSet[Symbology],
        settings: ScanSettings,
    ) -> List[RawHit]:
        """
        Decode an 8-bit grayscale image.

        Args:
            image: Grayscale image (height, width)
            symbologies: Non-empty filter, subset of ``supported``
            settings: Scan settings snapshot

        Returns:
            Hits in the coordinate space of ``image``
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(available={self.available})"


# =============================================================================
# GENERAL DECODER (zxing-cpp)
# =============================================================================

class ZXingEngine(DecodeEngine):
    """General multi-symbology decoder with rotation tolerance."""

    name = "zxing"
    supported = frozenset(ZXING_FORMAT_NAMES)

    @property
    def available(self) -> bool:
        return zxingcpp is not None

    def _formats(self, symbologies: FrozenSet[Symbology]) -> tuple:
        return tuple(
            getattr(zxingcpp.BarcodeFormat, ZXING_FORMAT_NAMES[s])
            for s in sorted(symbologies)
        )

    def decode(self, image, symbologies, settings) -> List[RawHit]:
        if zxingcpp is None:
            raise exceptions.engine_unavailable(self.name, "zxing-cpp is not installed")

        barcodes = zxingcpp.read_barcodes(
            image,
            formats=self._formats(symbologies),
            try_rotate=True,
            try_downscale=settings.try_harder_mode,
        )

        cap = max(1, settings.max_codes_per_frame)
        hits = []
        for barcode in list(barcodes)[:cap]:
            fmt = barcode.format
            format_name = getattr(fmt, "name", None) or str(fmt)
            hits.append(RawHit(
                payload=_payload_text(barcode.text),
                format_name=format_name,
                symbology=from_zxing_format(format_name),
                box=self._locate(barcode),
                valid=bool(getattr(barcode, "valid", True)),
            ))
        return hits

    def _locate(self, barcode) -> Optional[BoundingBox]:
        """
        Envelope of the reported quadrilateral.

        None if unavailable or degenerate (a linear symbol found on a
        single scan line has zero height).
        """
        try:
            position = barcode.position
            if position is None:
                return None
            corners = (
                position.top_left, position.top_right,
                position.bottom_right, position.bottom_left,
            )
            box = BoundingBox.from_points((p.x, p.y) for p in corners)
            return box if box.is_drawable else None
        except Exception as e:
            logger.warning(f"Failed to get {self.name} barcode position: {e}")
            return None


# =============================================================================
# REGION DATAMATRIX DECODER (libdmtx)
# =============================================================================

class DataMatrixEngine(DecodeEngine):
    """
    Region-scanning DataMatrix decoder.

    Bounded by a time budget and by ``max_codes_per_frame`` region probes;
    neither limit is retried. libdmtx image, decoder and region handles are
    acquired and released inside each pylibdmtx call.
    """

    name = "libdmtx"
    supported = frozenset({Symbology.DATA_MATRIX})

    def __init__(self, timeout_ms: int = 2000) -> None:
        self._timeout_ms = timeout_ms

    @property
    def available(self) -> bool:
        return dmtx_decode is not None

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def decode(self, image, symbologies, settings) -> List[RawHit]:
        if dmtx_decode is None:
            raise exceptions.engine_unavailable(self.name, "pylibdmtx is not installed")

        decoded = dmtx_decode(
            image,
            timeout=self._timeout_ms,
            max_count=max(1, settings.max_codes_per_frame),
        )

        image_height = image.shape[0]
        hits = []
        for item in decoded:
            hits.append(RawHit(
                payload=_payload_text(item.data),
                format_name="DataMatrix",
                symbology=Symbology.DATA_MATRIX,
                box=self._locate(item, image_height),
            ))
        return hits

    def _locate(self, item, image_height: int) -> Optional[BoundingBox]:
        """
        Convert a libdmtx rect to top-left origin.

        libdmtx measures y upward from the bottom edge, and rotated symbols
        can report negative extents.
        """
        try:
            rect = item.rect
            xs = (rect.left, rect.left + rect.width)
            ys = (rect.top, rect.top + rect.height)
            return BoundingBox.from_points((
                (min(xs), image_height - max(ys)),
                (max(xs), image_height - min(ys)),
            ))
        except Exception as e:
            logger.warning(f"Failed to get {self.name} region bounds: {e}")
            return None


# =============================================================================
# DEDICATED 1D DECODER (zbar)
# =============================================================================

class ZBarLinearEngine(DecodeEngine):
    """zbar restricted to the enabled linear symbologies."""

    name = "zbar"
    supported = frozenset(ZBAR_TYPE_NAMES) & LINEAR_SYMBOLOGIES

    @property
    def available(self) -> bool:
        return zbar_decode is not None

    def decode(self, image, symbologies, settings) -> List[RawHit]:
        if zbar_decode is None:
            raise exceptions.engine_unavailable(self.name, "pyzbar/zbar is not installed")

        symbols = [getattr(ZBarSymbol, ZBAR_TYPE_NAMES[s]) for s in sorted(symbologies)]
        decoded = zbar_decode(image, symbols=symbols)

        hits = []
        for barcode in decoded:
            hits.append(RawHit(
                payload=_payload_text(barcode.data),
                format_name=str(barcode.type),
                symbology=from_zbar_type(barcode.type),
                box=self._locate(barcode),
            ))
        return hits

    def _locate(self, barcode) -> Optional[BoundingBox]:
        """Envelope of the location polygon, falling back to zbar's rect."""
        try:
            polygon = list(barcode.polygon or [])
            if len(polygon) >= 4:
                return BoundingBox.from_points((p.x, p.y) for p in polygon)
            rect = barcode.rect
            return BoundingBox(x=rect.left, y=rect.top, width=rect.width, height=rect.height)
        except Exception as e:
            logger.warning(f"Failed to get {self.name} symbol location: {e}")
            return None


def default_engines(matrix_timeout_ms: int = 2000) -> dict:
    """Build the standard engine set keyed by role."""
    return {
        "general": ZXingEngine(),
        "matrix": DataMatrixEngine(timeout_ms=matrix_timeout_ms),
        "linear": ZBarLinearEngine(),
    }
