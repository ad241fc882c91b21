"""
==============================================================================
Overlay Layout Module
==============================================================================

Annotated copies of scanned images.

Per result:
-----------
- Bounding rectangle plus four L-shaped corner brackets
- Label "<1D|2D>[,INV] <symbology>: <payload>" above the box, or below
  it when the top edge is too close, clamped into the frame
- Semi-transparent label background (only when it fits in the frame)
- Numbered marker circle near the top-left corner

Colors:
-------
- GREEN: 1D symbologies
- ORANGE: 2D symbologies
- MAGENTA: anything found in the color-inverted pass

Layout is computed by ``compute_overlay_geometry`` as a pure function;
results without a safe plan are skipped when drawing but stay in the
returned data. A summary header band is always drawn.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from .models import BoundingBox, DecodeResult, RawImage, summarize


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# COLOR CONSTANTS (BGR format for OpenCV)
# =============================================================================

class ScannerColors:
    """
    Color constants for decode visualization.

    All colors are in BGR format (OpenCV standard).
    """

    # Linear symbologies
    GREEN = (0, 255, 0)

    # Matrix and stacked symbologies
    ORANGE = (255, 100, 0)

    # Found in the inverted pass (overrides the dimension color)
    MAGENTA = (255, 0, 255)

    # Text and marker colors
    TEXT_BLACK = (0, 0, 0)
    TEXT_WHITE = (255, 255, 255)
    TEXT_GREY = (200, 200, 200)

    # Header band
    HEADER_DARK = (40, 40, 40)


# =============================================================================
# LAYOUT CONSTANTS
# =============================================================================

BOX_THICKNESS = 3
CORNER_LENGTH = 15
CORNER_THICKNESS = 5

LABEL_FONT = cv2.FONT_HERSHEY_SIMPLEX
LABEL_FONT_SCALE = 0.7
LABEL_THICKNESS = 2
LABEL_GAP = 10
LABEL_PADDING = 5
LABEL_MAX_LENGTH = 30
LABEL_TRUNCATED_LENGTH = 27
LABEL_BACKGROUND_ALPHA = 0.7

MARKER_RADIUS = 20
MARKER_OFFSET = 20
MARKER_MARGIN = 25
MARKER_FONT_SCALE = 0.8
MARKER_OUTLINE = 2

HEADER_HEIGHT = 80
HEADER_IMAGE_WEIGHT = 0.3


@dataclass(frozen=True)
class OverlayPlan:
    """
    Everything needed to draw one result.

    ``label_rect`` is the text box (top-left x, y, width, height); it is
    None when the label cannot fit inside the frame at all.
    """

    number: int
    color: Tuple[int, int, int]
    box: BoundingBox
    corners: Tuple[Tuple[Tuple[int, int], Tuple[int, int]], ...]
    label_text: str
    label_origin: Optional[Tuple[int, int]]
    label_rect: Optional[BoundingBox]
    background_rect: Optional[BoundingBox]
    marker_center: Tuple[int, int]
    marker_radius: int = MARKER_RADIUS


def color_for(result: DecodeResult) -> Tuple[int, int, int]:
    """Pick the color class of a result."""
    if result.is_color_inverted:
        return ScannerColors.MAGENTA
    if result.is_two_dimensional:
        return ScannerColors.ORANGE
    return ScannerColors.GREEN


def build_label_text(result: DecodeResult) -> str:
    """
    Build the label for a result, truncated beyond 30 characters.

    Example:
        "1D Code128: PKG-0001", "2D,INV QR: https://exa..."
    """
    tag = result.symbology.dimension_tag
    if result.is_color_inverted:
        tag += ",INV"
    text = f"{tag} {result.symbology_name}: {result.data}"
    if len(text) > LABEL_MAX_LENGTH:
        text = text[:LABEL_TRUNCATED_LENGTH] + "..."
    return text


def _corner_segments(box: BoundingBox):
    left, top, right, bottom = box.x, box.y, box.right, box.bottom
    c = CORNER_LENGTH
    return (
        ((left, top), (left + c, top)),
        ((left, top), (left, top + c)),
        ((right, top), (right - c, top)),
        ((right, top), (right, top + c)),
        ((left, bottom), (left + c, bottom)),
        ((left, bottom), (left, bottom - c)),
        ((right, bottom), (right - c, bottom)),
        ((right, bottom), (right, bottom - c)),
    )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def compute_overlay_geometry(
    result: DecodeResult,
    index: int,
    image_width: int,
    image_height: int,
) -> Optional[OverlayPlan]:
    """
    Compute the overlay plan for one result.

    Args:
        result: Decode result in original-image coordinates
        index: Zero-based position of the result in the scan
        image_width: Frame width in pixels
        image_height: Frame height in pixels

    Returns:
        OverlayPlan, or None if the box is degenerate or leaves the frame
    """
    box = result.location
    if not box.is_drawable or not box.is_inside(image_width, image_height):
        return None

    text = build_label_text(result)
    (text_width, text_height), _ = cv2.getTextSize(
        text, LABEL_FONT, LABEL_FONT_SCALE, LABEL_THICKNESS
    )

    label_origin = None
    label_rect = None
    background_rect = None

    fits = text_width <= image_width and text_height + LABEL_GAP <= image_height
    if fits:
        # Above the box, or below it near the top edge
        if box.y > text_height + LABEL_GAP:
            tx, ty = box.x, box.y - LABEL_GAP
        else:
            tx, ty = box.x, box.bottom + text_height + LABEL_GAP

        tx = _clamp(tx, 0, image_width - text_width)
        ty = _clamp(ty, text_height, image_height - LABEL_GAP)
        label_origin = (tx, ty)
        label_rect = BoundingBox(x=tx, y=ty - text_height, width=text_width, height=text_height)

        bx = max(0, tx - LABEL_PADDING)
        by = max(0, ty - text_height - LABEL_PADDING)
        candidate = BoundingBox(
            x=bx,
            y=by,
            width=min(text_width + 2 * LABEL_PADDING, image_width - bx),
            height=min(text_height + 2 * LABEL_PADDING, image_height - by),
        )
        if candidate.is_drawable and candidate.is_inside(image_width, image_height):
            background_rect = candidate

    marker_center = (
        _clamp(box.x - MARKER_OFFSET, MARKER_MARGIN, image_width - MARKER_MARGIN),
        _clamp(box.y - MARKER_OFFSET, MARKER_MARGIN, image_height - MARKER_MARGIN),
    )

    return OverlayPlan(
        number=index + 1,
        color=color_for(result),
        box=box,
        corners=_corner_segments(box),
        label_text=text,
        label_origin=label_origin,
        label_rect=label_rect,
        background_rect=background_rect,
        marker_center=marker_center,
    )


# =============================================================================
# RENDERING
# =============================================================================

def _blend_rect(canvas: np.ndarray, rect: BoundingBox, color, image_weight: float) -> None:
    """Blend a solid color into ``rect`` in place."""
    roi = canvas[rect.y:rect.bottom, rect.x:rect.right]
    solid = np.empty_like(roi)
    solid[:] = color
    canvas[rect.y:rect.bottom, rect.x:rect.right] = cv2.addWeighted(
        roi, image_weight, solid, 1.0 - image_weight, 0
    )


def draw_plan(canvas: np.ndarray, plan: OverlayPlan) -> None:
    """Draw one overlay plan onto a BGR canvas."""
    box = plan.box
    cv2.rectangle(canvas, (box.x, box.y), (box.right, box.bottom), plan.color, BOX_THICKNESS)

    for start, end in plan.corners:
        cv2.line(canvas, start, end, plan.color, CORNER_THICKNESS)

    if plan.background_rect is not None:
        _blend_rect(canvas, plan.background_rect, plan.color, LABEL_BACKGROUND_ALPHA)

    if plan.label_origin is not None:
        cv2.putText(
            canvas, plan.label_text, plan.label_origin,
            LABEL_FONT, LABEL_FONT_SCALE, ScannerColors.TEXT_WHITE, LABEL_THICKNESS
        )

    cv2.circle(canvas, plan.marker_center, plan.marker_radius, plan.color, cv2.FILLED)
    cv2.circle(canvas, plan.marker_center, plan.marker_radius, ScannerColors.TEXT_BLACK, MARKER_OUTLINE)

    number = str(plan.number)
    (num_width, num_height), _ = cv2.getTextSize(number, LABEL_FONT, MARKER_FONT_SCALE, 2)
    cx, cy = plan.marker_center
    cv2.putText(
        canvas, number, (cx - num_width // 2, cy + num_height // 2),
        LABEL_FONT, MARKER_FONT_SCALE, ScannerColors.TEXT_BLACK, 2
    )


def draw_summary_header(canvas: np.ndarray, results: Sequence[DecodeResult], title: str) -> None:
    """Darkened band across the top with total / 1D / 2D / inverted counts."""
    height, width = canvas.shape[:2]
    band = BoundingBox(x=0, y=0, width=width, height=min(HEADER_HEIGHT, height))
    if band.is_drawable:
        _blend_rect(canvas, band, ScannerColors.HEADER_DARK, HEADER_IMAGE_WEIGHT)

    count_1d, count_2d, count_inverted = summarize(results)
    cv2.putText(
        canvas, f"{title} | Found: {len(results)} codes", (10, 25),
        LABEL_FONT, 0.8, ScannerColors.TEXT_WHITE, 2
    )
    cv2.putText(
        canvas, f"1D: {count_1d} | 2D: {count_2d} | Inverted: {count_inverted}", (10, 55),
        LABEL_FONT, 0.6, ScannerColors.TEXT_GREY, 1
    )


def _canvas_from(image: Union[RawImage, np.ndarray]) -> np.ndarray:
    if isinstance(image, RawImage):
        return image.to_bgr()
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image.copy()


def render_overlays(
    image: Union[RawImage, np.ndarray],
    results: Sequence[DecodeResult],
    title: str = "LABELSCAN",
) -> np.ndarray:
    """
    Draw every plannable result plus the header onto a copy of ``image``.

    Args:
        image: Source image (never modified)
        results: Decode results in original-image coordinates
        title: Header title

    Returns:
        Annotated BGR image
    """
    canvas = _canvas_from(image)
    height, width = canvas.shape[:2]
    drawn: List[int] = []

    for index, result in enumerate(results):
        plan = compute_overlay_geometry(result, index, width, height)
        if plan is None:
            logger.warning(
                f"Skipping overlay for result {index + 1}: box {result.location.as_tuple()} "
                f"outside {width}x{height}"
            )
            continue
        try:
            draw_plan(canvas, plan)
            drawn.append(plan.number)
            logger.debug(
                f"Drew overlay {plan.number}: {result.symbology_name} at "
                f"({result.location.x},{result.location.y})"
            )
        except Exception as e:
            logger.error(f"❌ Error drawing overlay {index + 1}: {e}")

    try:
        draw_summary_header(canvas, results, title)
    except Exception as e:
        logger.error(f"❌ Error drawing summary header: {e}")

    logger.info(f"🖼️  Overlay drawing completed: {len(drawn)}/{len(results)} result(s) drawn")
    return canvas
