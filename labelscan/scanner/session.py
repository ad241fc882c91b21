"""
==============================================================================
Frame Session Module
==============================================================================

Lifecycle gate for frame processing.

State Machine:
-------------

    ┌──────┐  start_new_frame_sequence()  ┌────────┐
    │ IDLE │ ───────────────────────────▶ │ ACTIVE │
    └──────┘ ◀─────────────────────────── └────────┘
                 end_frame_sequence()

- Initial state is IDLE; there is no terminal state.
- Starting requires an initialized session.
- Ending an IDLE session is a no-op.
- close() (or leaving the ``with`` block) ends an open sequence.

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from labelscan.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


class FrameSession:
    """
    Recognition context gating ``BarcodeScanner.process_frame``.

    One instance per scanner. Use ``frame_sequence()`` to guarantee the
    sequence is ended on every exit path.

    Example:
        >>> with FrameSession() as session:
        ...     with session.frame_sequence():
        ...         outcome = scanner.process_frame(image)
    """

    def __init__(self) -> None:
        self._frame_sequence_started = False
        self._initialized = True
        logger.debug("Recognition context created")

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_frame_sequence_started(self) -> bool:
        return self._frame_sequence_started

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def start_new_frame_sequence(self) -> bool:
        """
        Move to ACTIVE.

        Returns:
            False if the session has been released, True otherwise
        """
        if not self._initialized:
            logger.error("Cannot start frame sequence on a released context")
            return False

        self._frame_sequence_started = True
        logger.info("▶️  New frame sequence started")
        return True

    def end_frame_sequence(self) -> None:
        """Move to IDLE. Idempotent."""
        if self._frame_sequence_started:
            self._frame_sequence_started = False
            logger.info("⏹️  Frame sequence ended")

    @contextmanager
    def frame_sequence(self) -> Iterator["FrameSession"]:
        """
        Scope one frame sequence.

        Raises:
            ScanException: If the sequence cannot be started
        """
        if not self.start_new_frame_sequence():
            raise exceptions.invalid_recognition_context()
        try:
            yield self
        finally:
            self.end_frame_sequence()

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def close(self) -> None:
        """End any open sequence and release the context."""
        if not self._initialized:
            return
        self.end_frame_sequence()
        self._initialized = False
        logger.debug("Recognition context released")

    def __enter__(self) -> "FrameSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "ACTIVE" if self._frame_sequence_started else "IDLE"
        return f"FrameSession(state={state}, initialized={self._initialized})"
