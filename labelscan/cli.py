"""
==============================================================================
Label Scanner - Command Line Entry Point
==============================================================================

Scans one image, prints a report and writes an annotated copy.

Usage:
------
    labelscan <image_path>
    python -m labelscan <image_path>

Output Files (working directory, see labelscan.config):
-------------------------------------------------------
- labelscan_output.jpg: codes were found
- labelscan_debug.jpg: nothing found (or no usable result)
- labelscan_error_debug.jpg: reporting failed after the scan

Exit Codes:
-----------
- 0: processing completed (even with zero codes found)
- 1: bad arguments, unreadable image or any unexpected fault

==============================================================================
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from labelscan.config import Settings, get_settings
from labelscan.core import ScanException, exceptions
from labelscan.scanner import (
    BarcodeScanner,
    FrameSession,
    ScanStatus,
    configure_from_preset_name,
    create_scan_settings,
    profile_for_preset_name,
)
from labelscan.utils import ImagePathValidator, load_image, save_image
from labelscan.utils.scan_report import ScanReport


USAGE = "Usage: labelscan <image_path>"

logger = logging.getLogger(__name__)


# ============================================================================
# LOGGING SETUP
# ============================================================================

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )


# ============================================================================
# SCAN FLOW
# ============================================================================

def run(image_path: str, settings: Settings) -> int:
    """
    Scan one image file end to end.

    Raises:
        ScanException: If the image cannot be read
    """
    is_valid, error = ImagePathValidator().validate(image_path)
    if not is_valid:
        logger.error(f"❌ {error}")
        raise exceptions.image_unreadable(image_path)

    image = load_image(image_path)
    height, width = image.shape[:2]

    scan_settings = configure_from_preset_name(create_scan_settings(), settings.preset)
    profile = profile_for_preset_name(settings.preset)
    logger.info(f"⚙️  Preset '{settings.preset}' with '{profile.name}' preprocessing")

    with FrameSession() as session:
        scanner = BarcodeScanner(
            session,
            scan_settings,
            profile=profile,
            matrix_timeout_ms=settings.matrix_timeout_ms,
        )
        scanner.wait_for_setup_completed()

        with session.frame_sequence():
            outcome = scanner.process_frame(image)

        annotated = scanner.annotate(image, settings.header_title)

        try:
            report = ScanReport()
            text = report.format(outcome, Path(image_path).name, width, height, profile.name)
            print(text)
            report.write(text, image_path)
        except Exception:
            save_image(settings.error_debug_image, annotated)
            raise

    if outcome.status == ScanStatus.SUCCESS:
        save_image(settings.output_image, annotated)
        print(f"✅ Found {len(outcome.results)} code(s); annotated image: {settings.output_image}")
    else:
        save_image(settings.debug_image, annotated)
        print(f"⚠️  {outcome.status.name}; debug image: {settings.debug_image}")

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Process entry point; maps every fault to exit code 1."""
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        settings = get_settings()
        configure_logging(settings)
        logger.info(f"🚀 {settings.app_name} starting...")

        if len(args) != 1:
            raise exceptions.bad_arguments(USAGE)
        return run(args[0], settings)

    except ScanException as e:
        if e.code == "BAD_ARGUMENTS":
            print(e.message)
        else:
            logger.error(f"❌ {e.message}")
            logger.debug(f"Error details: {e.to_dict()}")
        return e.exit_code

    except Exception as e:
        error = exceptions.internal_error(f"Unexpected error: {e}")
        logger.exception(f"❌ {error.message}")
        return error.exit_code


if __name__ == "__main__":
    sys.exit(main())
