"""
Image file load/save helpers built on OpenCV.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from labelscan.core import exceptions


# Module logger
logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_image(path: PathLike) -> np.ndarray:
    """
    Read an image file as a BGR array.

    Raises:
        ScanException: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.exists():
        logger.error(f"Image not found: {path}")
        raise exceptions.image_unreadable(str(path))

    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None or image.size == 0:
        logger.error(f"Could not read image: {path}")
        raise exceptions.image_unreadable(str(path))

    logger.info(f"📷 Loaded image: {path} ({image.shape[1]}x{image.shape[0]})")
    return image


def save_image(path: PathLike, image: np.ndarray) -> bool:
    """Write an image; returns False if OpenCV refuses to encode it."""
    ok = bool(cv2.imwrite(str(path), image))
    if ok:
        logger.info(f"💾 Saved image: {path}")
    else:
        logger.error(f"Could not write image: {path}")
    return ok
