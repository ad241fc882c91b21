"""
==============================================================================
Barcode Scanner Core Module
==============================================================================

Frame processing entry point: session gate, preprocessing, normal and
color-inverted decode passes, result aggregation.

process_frame contract:
-----------------------
1. Session not in an active frame sequence -> PROCESSING_ERROR
2. Missing or empty image -> INVALID_IMAGE
3. Otherwise decode; SUCCESS if anything was found, else NO_CODES_FOUND

Checks run in that order, so an inactive session wins over a bad image.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

import cv2
import numpy as np

from labelscan.core import exceptions

from .engines import DecodeEngine, default_engines
from .models import DecodeResult, RawImage, ScanOutcome, ScanStatus
from .orchestrator import DecodeOrchestrator
from .overlay import render_overlays
from .preprocessing import ENHANCED, PreprocessingProfile
from .session import FrameSession
from .settings import ScanSettings


# Module logger
logger = logging.getLogger(__name__)

ImageInput = Union[RawImage, np.ndarray, None]


class BarcodeScanner:
    """
    Multi-engine barcode scanner for still frames.

    The scanner owns the results of its most recent scan; the session and
    settings stay owned by the caller.

    Attributes:
        session: Frame session gating process_frame
        settings: Caller-owned scan settings (snapshotted per scan)
        profile: Preprocessing profile

    Example:
        >>> session = FrameSession()
        >>> settings = configure_for_low_resolution(create_scan_settings())
        >>> scanner = BarcodeScanner(session, settings)
        >>> with session.frame_sequence():
        ...     outcome = scanner.process_frame(image)
    """

    def __init__(
        self,
        session: FrameSession,
        settings: ScanSettings,
        profile: PreprocessingProfile = ENHANCED,
        engines: Optional[Dict[str, DecodeEngine]] = None,
        matrix_timeout_ms: int = 2000,
    ) -> None:
        """
        Initialize scanner instance.

        Args:
            session: Initialized frame session
            settings: Scan settings
            profile: Preprocessing profile (BASELINE or ENHANCED)
            engines: Engines keyed by role ("general", "matrix", "linear");
                defaults to the zxing-cpp / libdmtx / zbar set
            matrix_timeout_ms: Region decoder time budget for default engines

        Raises:
            ScanException: If the session is not initialized or the
                settings are not a ScanSettings
        """
        if session is None or not session.is_initialized:
            raise exceptions.invalid_recognition_context()

        if not isinstance(settings, ScanSettings):
            raise exceptions.invalid_settings(f"expected ScanSettings, got {type(settings).__name__}")

        if engines is None:
            engines = default_engines(matrix_timeout_ms)

        self._session = session
        self._settings = settings
        self._profile = profile
        self._orchestrator = DecodeOrchestrator(
            profile,
            general=engines.get("general"),
            matrix=engines.get("matrix"),
            linear=engines.get("linear"),
        )
        self._last_results: List[DecodeResult] = []

        logger.info(f"🚀 Barcode scanner created (profile: {profile.name})")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def session(self) -> FrameSession:
        return self._session

    @property
    def settings(self) -> ScanSettings:
        return self._settings

    @property
    def profile(self) -> PreprocessingProfile:
        return self._profile

    @property
    def last_scan_results(self) -> Tuple[DecodeResult, ...]:
        """Results of the most recent scan."""
        return tuple(self._last_results)

    def wait_for_setup_completed(self) -> bool:
        """Setup is synchronous; always ready once constructed."""
        logger.debug("Scanner setup completed")
        return True

    # =========================================================================
    # FRAME PROCESSING METHODS
    # =========================================================================

    def process_frame(self, image: ImageInput) -> ScanOutcome:
        """
        Scan one frame.

        Args:
            image: RawImage or OpenCV array (gray, BGR or BGRA)

        Returns:
            ScanOutcome with status and ordered results (normal pass first)
        """
        self._last_results = []

        if not self._session.is_frame_sequence_started:
            logger.error("Frame sequence not started")
            return ScanOutcome(status=ScanStatus.PROCESSING_ERROR)

        raw = self._as_raw_image(image)
        if raw is None:
            logger.error("Invalid image")
            return ScanOutcome(status=ScanStatus.INVALID_IMAGE)

        settings = self._settings.snapshot()
        gray = raw.to_gray()
        working = self._profile.run(gray)
        logger.info(
            f"Preprocessed {raw.width}x{raw.height} frame with '{self._profile.name}' "
            f"profile -> {working.shape[1]}x{working.shape[0]}"
        )

        results = self._process_with_color_inversion(settings, gray, working)
        self._last_results = results

        status = ScanStatus.SUCCESS if results else ScanStatus.NO_CODES_FOUND
        logger.info(f"📊 Scan finished: {status.name} ({len(results)} result(s))")
        return ScanOutcome(status=status, results=tuple(results))

    def _process_with_color_inversion(
        self,
        settings: ScanSettings,
        gray: np.ndarray,
        working: np.ndarray,
    ) -> List[DecodeResult]:
        """Normal pass, then an inverted pass if any enabled symbology asks for it."""
        results = self._orchestrator.decode(settings, gray, working, inverted=False)

        if settings.any_color_inversion():
            logger.info("🔄 Running color-inverted pass")
            results += self._orchestrator.decode(
                settings,
                cv2.bitwise_not(gray),
                cv2.bitwise_not(working),
                inverted=True,
            )

        return results

    @staticmethod
    def _as_raw_image(image: ImageInput) -> Optional[RawImage]:
        if image is None:
            return None

        if isinstance(image, RawImage):
            return None if image.is_empty else image

        array = np.asarray(image)
        if array.size == 0:
            return None

        try:
            return RawImage.from_array(array)
        except ValueError as e:
            logger.error(f"Unsupported image: {e}")
            return None

    # =========================================================================
    # ANNOTATION
    # =========================================================================

    def annotate(self, image: Union[RawImage, np.ndarray], title: str = "LABELSCAN") -> np.ndarray:
        """Render the last scan's results onto a copy of ``image``."""
        return render_overlays(image, self._last_results, title)
