"""
==============================================================================
Preprocessing Pipeline Module
==============================================================================

Deterministic grayscale transforms applied before the general decoder.

Profiles:
---------
- BASELINE: no transforms, single native-scale decode
- ENHANCED: low-resolution recovery
    1. 2x bicubic upscale
    2. CLAHE local contrast equalization (clip 3.0, 8x8 tiles)
    3. Non-local-means denoise (edge preserving)
    4. Unsharp mask: sharpened = denoised + 0.7 * (denoised - blur(denoised))
    5. Gaussian adaptive threshold to binary
    6. 3x3 morphological closing

A profile is one descriptor (ordered stages + scale ladder), so both
variants run through the same code path.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import cv2
import numpy as np


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# STAGES
# =============================================================================

UPSCALE_FACTOR = 2.0
CLAHE_CLIP_LIMIT = 3.0
CLAHE_TILE_GRID = (8, 8)
DENOISE_STRENGTH = 10
DENOISE_TEMPLATE_WINDOW = 7
DENOISE_SEARCH_WINDOW = 21
UNSHARP_SIGMA = 3.0
UNSHARP_AMOUNT = 0.7
THRESHOLD_BLOCK_SIZE = 21
THRESHOLD_OFFSET = 5
CLOSING_KERNEL = (3, 3)


def upscale(image: np.ndarray) -> np.ndarray:
    return cv2.resize(
        image, None, fx=UPSCALE_FACTOR, fy=UPSCALE_FACTOR,
        interpolation=cv2.INTER_CUBIC
    )


def equalize_contrast(image: np.ndarray) -> np.ndarray:
    clahe = cv2.createCLAHE(clipLimit=CLAHE_CLIP_LIMIT, tileGridSize=CLAHE_TILE_GRID)
    return clahe.apply(image)


def denoise(image: np.ndarray) -> np.ndarray:
    return cv2.fastNlMeansDenoising(
        image, None,
        h=DENOISE_STRENGTH,
        templateWindowSize=DENOISE_TEMPLATE_WINDOW,
        searchWindowSize=DENOISE_SEARCH_WINDOW,
    )


def sharpen(image: np.ndarray) -> np.ndarray:
    """Unsharp mask computed in float and clipped back to uint8."""
    blurred = cv2.GaussianBlur(image, (0, 0), UNSHARP_SIGMA)
    base = image.astype(np.float32)
    sharpened = base + UNSHARP_AMOUNT * (base - blurred.astype(np.float32))
    return np.clip(sharpened, 0, 255).astype(np.uint8)


def binarize(image: np.ndarray) -> np.ndarray:
    return cv2.adaptiveThreshold(
        image, 255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY,
        THRESHOLD_BLOCK_SIZE, THRESHOLD_OFFSET,
    )


def close_speckles(image: np.ndarray) -> np.ndarray:
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, CLOSING_KERNEL)
    return cv2.morphologyEx(image, cv2.MORPH_CLOSE, kernel)


@dataclass(frozen=True)
class PreprocessingStage:
    """Named image transform."""

    name: str
    apply: Callable[[np.ndarray], np.ndarray]


# =============================================================================
# PROFILES
# =============================================================================

@dataclass(frozen=True)
class PreprocessingProfile:
    """
    Preprocessing profile descriptor.

    Attributes:
        name: Profile name for logging
        stages: Ordered transforms applied to the grayscale frame
        scale_ladder: Extra scales the general decoder is run at
        use_linear_engine: Whether the dedicated 1D decoder participates
    """

    name: str
    stages: Tuple[PreprocessingStage, ...]
    scale_ladder: Tuple[float, ...]
    use_linear_engine: bool

    def run(self, gray: np.ndarray) -> np.ndarray:
        """
        Apply every stage in order.

        Works on a copy; the caller's buffer is never modified.
        """
        working = gray.copy()
        for stage in self.stages:
            working = stage.apply(working)
            logger.debug(
                f"Stage '{stage.name}' -> {working.shape[1]}x{working.shape[0]}"
            )
        return working


BASELINE = PreprocessingProfile(
    name="baseline",
    stages=(),
    scale_ladder=(1.0,),
    use_linear_engine=False,
)

ENHANCED = PreprocessingProfile(
    name="enhanced",
    stages=(
        PreprocessingStage("upscale", upscale),
        PreprocessingStage("clahe", equalize_contrast),
        PreprocessingStage("denoise", denoise),
        PreprocessingStage("unsharp", sharpen),
        PreprocessingStage("adaptive_threshold", binarize),
        PreprocessingStage("closing", close_speckles),
    ),
    scale_ladder=(1.0, 1.5, 2.0),
    use_linear_engine=True,
)

_PRESET_PROFILES: Dict[str, PreprocessingProfile] = {
    "shipping_label": BASELINE,
    "low_resolution": ENHANCED,
}


def profile_for_preset_name(name: str) -> PreprocessingProfile:
    """
    Profile paired with a configuration bundle.

    Raises:
        KeyError: If the bundle name is unknown
    """
    return _PRESET_PROFILES[name]


def scale_image(image: np.ndarray, scale: float) -> np.ndarray:
    """Resize by ``scale``; 1.0 returns the image itself."""
    if scale == 1.0:
        return image
    return cv2.resize(image, None, fx=scale, fy=scale, interpolation=cv2.INTER_LINEAR)
