"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides scan settings, frame session, stub engine and image fixtures.

==============================================================================
"""

import copy
from typing import Callable, Dict, Generator, Iterable, List, Optional, Union

import numpy as np
import pytest

from labelscan.config import get_settings
from labelscan.scanner.engines import DecodeEngine
from labelscan.scanner.models import BoundingBox, RawHit
from labelscan.scanner.preprocessing import PreprocessingProfile
from labelscan.scanner.session import FrameSession
from labelscan.scanner.settings import ScanSettings, create_scan_settings
from labelscan.scanner.symbology import (
    LINEAR_SYMBOLOGIES,
    ZXING_FORMAT_NAMES,
    Symbology,
)


# ============================================================================
# STUB ENGINES
# ============================================================================

HitSource = Union[List[RawHit], Callable[[np.ndarray], List[RawHit]]]


class StubEngine(DecodeEngine):
    """
    Engine double that records every call.

    Each call is recorded as a dict with the image shape, the image mean
    and the symbology filter it was given.
    """

    def __init__(
        self,
        name: str,
        supported: Iterable[Symbology],
        hits: Optional[HitSource] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self.supported = frozenset(supported)
        self._hits = hits or []
        self._error = error
        self.calls: List[Dict] = []

    @property
    def available(self) -> bool:
        return True

    def decode(self, image, symbologies, settings) -> List[RawHit]:
        self.calls.append({
            "shape": image.shape,
            "mean": float(image.mean()),
            "symbologies": frozenset(symbologies),
        })
        if self._error is not None:
            raise self._error
        hits = self._hits(image) if callable(self._hits) else self._hits
        return [copy.copy(hit) for hit in hits]

    @property
    def call_count(self) -> int:
        return len(self.calls)


def make_hit(
    payload: str = "PKG-0001",
    symbology: Optional[Symbology] = Symbology.CODE128,
    box=(20, 20, 40, 40),
    valid: bool = True,
) -> RawHit:
    """Build a RawHit; ``box=None`` means no location."""
    location = None
    if box is not None:
        x, y, w, h = box
        location = BoundingBox(x=x, y=y, width=w, height=h)
    return RawHit(
        payload=payload,
        format_name=symbology.display_name if symbology else "Unknown",
        symbology=symbology,
        box=location,
        valid=valid,
    )


# Profile without stages for fast scanner tests
PLAIN_PROFILE = PreprocessingProfile(
    name="plain",
    stages=(),
    scale_ladder=(1.0,),
    use_linear_engine=True,
)


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_process_settings() -> Generator[None, None, None]:
    """Drop the cached process settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scan_settings() -> ScanSettings:
    """All-disabled scan settings."""
    return create_scan_settings()


@pytest.fixture
def code128_settings(scan_settings: ScanSettings) -> ScanSettings:
    """Settings with only Code128 enabled, no inversion."""
    scan_settings.set_symbology_enabled(Symbology.CODE128, True)
    return scan_settings


# ============================================================================
# SESSION FIXTURES
# ============================================================================

@pytest.fixture
def session() -> Generator[FrameSession, None, None]:
    """Idle frame session."""
    with FrameSession() as frame_session:
        yield frame_session


@pytest.fixture
def active_session(session: FrameSession) -> FrameSession:
    """Frame session with an open frame sequence."""
    assert session.start_new_frame_sequence()
    return session


# ============================================================================
# ENGINE FIXTURES
# ============================================================================

@pytest.fixture
def general_engine() -> StubEngine:
    return StubEngine("general-stub", ZXING_FORMAT_NAMES.keys())


@pytest.fixture
def matrix_engine() -> StubEngine:
    return StubEngine("matrix-stub", {Symbology.DATA_MATRIX})


@pytest.fixture
def linear_engine() -> StubEngine:
    return StubEngine("linear-stub", LINEAR_SYMBOLOGIES)


@pytest.fixture
def engines(general_engine, matrix_engine, linear_engine) -> Dict[str, StubEngine]:
    return {
        "general": general_engine,
        "matrix": matrix_engine,
        "linear": linear_engine,
    }


# ============================================================================
# IMAGE FIXTURES
# ============================================================================

@pytest.fixture
def white_image() -> np.ndarray:
    """100x100 white BGR image."""
    return np.full((100, 100, 3), 255, dtype=np.uint8)


@pytest.fixture
def gray_image() -> np.ndarray:
    """Deterministic 60x80 grayscale gradient with a dark block."""
    image = np.tile(np.linspace(40, 220, 80, dtype=np.uint8), (60, 1))
    image[20:40, 30:50] = 10
    return image
