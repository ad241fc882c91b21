"""
==============================================================================
Scan Report Module
==============================================================================

Console and file report generator for completed scans.

This module implements:
- ScanReport: Class for formatting scan outcomes

Report Contents:
----------------
- Scan metadata (image, size, status, profile, timestamp)
- One block per decoded result with location and format details
- Summary statistics (1D / 2D / inverted counts)

File Format:
-----------
scan_{image_stem}_{YYYY-MM-DD}_{HH-MM-SS}.log

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from labelscan.config import get_settings
from labelscan.scanner.models import ScanOutcome


# Module logger
logger = logging.getLogger(__name__)


class ScanReport:
    """
    Formatter for scan outcomes.

    Attributes:
        _report_dir: Directory for report files (None disables file output)

    Example:
        >>> report = ScanReport()
        >>> text = report.format(outcome, "label.jpg", 640, 480, "enhanced")
        >>> print(text)
    """

    def __init__(self, report_dir: Optional[Path] = None) -> None:
        """
        Initialize the scan report.

        Args:
            report_dir: Custom report directory (uses settings if None)
        """
        settings = get_settings()
        self._report_dir = report_dir or settings.report_path
        if self._report_dir is not None:
            self._report_dir.mkdir(parents=True, exist_ok=True)

    def format(
        self,
        outcome: ScanOutcome,
        image_name: str,
        width: int,
        height: int,
        profile_name: str,
    ) -> str:
        """Format the report text for one scan."""
        lines = []
        separator = "=" * 60
        dash_separator = "-" * 60

        # Header
        lines.extend([
            separator,
            "BARCODE SCAN REPORT",
            separator,
            "",
            f"Image:           {image_name}",
            f"Size:            {width}x{height}",
            f"Profile:         {profile_name}",
            f"Status:          {outcome.status.name}",
            f"Scanned At:      {self._format_datetime(datetime.now(timezone.utc))}",
            "",
        ])

        # Results section
        lines.extend([separator, f"RESULTS ({len(outcome.results)})", separator, ""])

        if not outcome.results:
            lines.extend(["No barcodes detected.", ""])

        for index, result in enumerate(outcome.results, start=1):
            box = result.location
            lines.extend([
                f"[{index}] {result.symbology.dimension_tag} {result.symbology_name}",
                f"    Data:        {result.data}",
                f"    Location:    ({box.x}, {box.y}) {box.width}x{box.height}",
                f"    Inverted:    {'Yes' if result.is_color_inverted else 'No'}",
                f"    Confidence:  {result.confidence * 100:.1f}%",
                f"    Engine:      {result.engine or 'unknown'}",
            ])

            if result.format_details:
                lines.append("    Details:")
                for detail in result.format_details.splitlines():
                    lines.append(f"      {detail}")

            lines.append("")

        # Summary section
        lines.extend([dash_separator, "SUMMARY", dash_separator, ""])
        lines.extend([
            f"Total Codes:     {len(outcome.results)}",
            f"1D Codes:        {outcome.count_1d}",
            f"2D Codes:        {outcome.count_2d}",
            f"Inverted:        {outcome.count_inverted}",
            "",
            separator,
        ])

        return "\n".join(lines)

    def write(self, content: str, image_name: str) -> Optional[str]:
        """
        Write report content to the report directory.

        Returns:
            Path to the report file, or None when file output is disabled
        """
        if self._report_dir is None:
            return None

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
        filename = f"scan_{Path(image_name).stem}_{timestamp}.log"
        filepath = self._report_dir / filename
        filepath.write_text(content, encoding="utf-8")

        logger.info(f"✅ Generated report file: {filepath}")
        return str(filepath)

    @staticmethod
    def _format_datetime(dt: Optional[datetime]) -> str:
        """Format datetime for display."""
        if dt is None:
            return "N/A"
        return dt.strftime("%Y-%m-%d %H:%M:%S")
