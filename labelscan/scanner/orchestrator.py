"""
==============================================================================
Multi-Engine Decode Orchestrator
==============================================================================

Fans one grayscale frame out to the decode engines and normalizes their
hits into DecodeResult objects in original-image coordinates.

Per pass:
---------
1. General decoder on the preprocessed working image, once per scale of
   the profile's ladder (hits from every scale are kept)
2. Region DataMatrix decoder on the source grayscale at native scale
3. Dedicated 1D decoder on the source grayscale (profiles that use it)

An engine is called only when its filter (supported & enabled) is
non-empty. Every engine fault is logged and absorbed; one failing engine
never aborts the pass.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional

import numpy as np

from labelscan.core import exceptions
from labelscan.core.exceptions import ScanException

from .engines import DecodeEngine
from .enrichment import format_details_for
from .models import BoundingBox, DecodeResult, RawHit
from .preprocessing import PreprocessingProfile, scale_image
from .settings import ScanSettings


# Module logger
logger = logging.getLogger(__name__)


class DecodeOrchestrator:
    """
    Runs the engines of one profile over a frame.

    Attributes:
        profile: Preprocessing profile (scale ladder, 1D decoder switch)
        general: General multi-symbology engine
        matrix: Region DataMatrix engine
        linear: Dedicated 1D engine
    """

    def __init__(
        self,
        profile: PreprocessingProfile,
        general: Optional[DecodeEngine] = None,
        matrix: Optional[DecodeEngine] = None,
        linear: Optional[DecodeEngine] = None,
    ) -> None:
        self.profile = profile
        self.general = general
        self.matrix = matrix
        self.linear = linear

    def decode(
        self,
        settings: ScanSettings,
        source_gray: np.ndarray,
        working: np.ndarray,
        inverted: bool = False,
    ) -> List[DecodeResult]:
        """
        Decode one pass.

        Args:
            settings: Settings snapshot for this scan
            source_gray: Grayscale frame in original-image space
            working: Preprocessed frame (possibly upscaled)
            inverted: Tag every result as color inverted

        Returns:
            Results in engine order, general decoder scales first
        """
        enabled = settings.get_enabled_symbologies()
        source_height, source_width = source_gray.shape[:2]
        results: List[DecodeResult] = []

        # General decoder across the scale ladder
        general_filter = self._filter(self.general, enabled)
        if general_filter:
            for scale in self.profile.scale_ladder:
                scaled = scale_image(working, scale)
                scale_x = scaled.shape[1] / source_width
                scale_y = scaled.shape[0] / source_height
                results += self._run_engine(
                    self.general, scaled, general_filter, settings,
                    scale_x, scale_y, source_width, source_height, inverted,
                )

        # Region DataMatrix decoder at native scale
        matrix_filter = self._filter(self.matrix, enabled)
        if matrix_filter:
            results += self._run_engine(
                self.matrix, source_gray, matrix_filter, settings,
                1.0, 1.0, source_width, source_height, inverted,
            )

        # Dedicated 1D decoder at native scale
        if self.profile.use_linear_engine:
            linear_filter = self._filter(self.linear, enabled)
            if linear_filter:
                results += self._run_engine(
                    self.linear, source_gray, linear_filter, settings,
                    1.0, 1.0, source_width, source_height, inverted,
                )

        return results

    @staticmethod
    def _filter(engine: Optional[DecodeEngine], enabled: FrozenSet) -> FrozenSet:
        if engine is None:
            return frozenset()
        return engine.filter_for(enabled)

    def _run_engine(
        self,
        engine: DecodeEngine,
        image: np.ndarray,
        symbologies: FrozenSet,
        settings: ScanSettings,
        scale_x: float,
        scale_y: float,
        source_width: int,
        source_height: int,
        inverted: bool,
    ) -> List[DecodeResult]:
        try:
            hits = engine.decode(image, symbologies, settings)
        except ScanException as e:
            logger.warning(f"⚠️  {e.message}")
            return []
        except Exception as e:
            logger.error(f"❌ {exceptions.engine_failure(engine.name, e).message}")
            return []

        results = []
        for hit in hits:
            result = self._normalize(
                hit, engine.name, symbologies,
                scale_x, scale_y, source_width, source_height, inverted,
            )
            if result is not None:
                results.append(result)

        logger.info(
            f"Engine '{engine.name}' at {scale_x:.2f}x{scale_y:.2f}: "
            f"{len(results)} result(s){' [inverted]' if inverted else ''}"
        )
        return results

    @staticmethod
    def _normalize(
        hit: RawHit,
        engine_name: str,
        symbologies: FrozenSet,
        scale_x: float,
        scale_y: float,
        source_width: int,
        source_height: int,
        inverted: bool,
    ) -> Optional[DecodeResult]:
        """Map one engine hit to a DecodeResult, or None if it is discarded."""
        if not hit.valid or not hit.payload:
            logger.debug(f"Discarding empty or invalid {engine_name} hit")
            return None

        if hit.symbology is None or hit.symbology not in symbologies:
            logger.debug(f"Discarding {engine_name} hit with format '{hit.format_name}'")
            return None

        if hit.box is None:
            location = BoundingBox.full_image(source_width, source_height)
        else:
            location = hit.box.unscaled(scale_x, scale_y)

        result = DecodeResult(
            data=hit.payload,
            symbology=hit.symbology,
            location=location,
            confidence=1.0,
            is_color_inverted=inverted,
            format_details=format_details_for(hit.symbology, hit.payload),
            engine=engine_name,
        )
        logger.debug(
            f"{result.symbology_name}: '{result.data}' at {location.as_tuple()}"
        )
        return result
