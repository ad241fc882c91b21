"""
==============================================================================
Scan Settings Module
==============================================================================

Caller-owned configuration of a scanner: which symbologies are enabled,
which ones are also searched for as color-inverted (light-on-dark) codes,
and the global scan parameters.

Both symbology maps are always fully populated. A settings object missing
an entry for any known symbology fails validation at construction, so a
lookup never silently defaults to False.

Named bundles ("shipping label", "low resolution") are plain sequences of
setter calls.

==============================================================================
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .symbology import ALL_SYMBOLOGIES, Symbology


# Module logger
logger = logging.getLogger(__name__)


class ScanPreset(str, enum.Enum):
    """Scanner operating preset."""

    SINGLE_FRAME = "single_frame"
    REALTIME = "realtime"


def _all_disabled() -> Dict[Symbology, bool]:
    return {symbology: False for symbology in Symbology}


class ScanSettings(BaseModel):
    """
    Symbology and scan parameter configuration.

    Attributes:
        enabled_symbologies: symbology -> enabled flag (every symbology present)
        color_inverted: symbology -> search inverted flag (every symbology present)
        max_codes_per_frame: result cap per engine call (caller keeps it >= 1)
        search_whole_image: search the full frame rather than a center region
        try_harder_mode: let engines spend more effort per image
        preset: preset the settings were created with

    Example:
        >>> settings = create_scan_settings()
        >>> settings.set_symbology_enabled(Symbology.CODE128, True)
        >>> settings.get_enabled_symbologies()
        frozenset({<Symbology.CODE128: 'code128'>})
    """

    model_config = ConfigDict(extra="forbid")

    enabled_symbologies: Dict[Symbology, bool] = Field(default_factory=_all_disabled)
    color_inverted: Dict[Symbology, bool] = Field(default_factory=_all_disabled)
    max_codes_per_frame: int = Field(default=1, description="Result cap per engine call")
    search_whole_image: bool = Field(default=False)
    try_harder_mode: bool = Field(default=False)
    preset: ScanPreset = Field(default=ScanPreset.SINGLE_FRAME)

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("enabled_symbologies", "color_inverted")
    @classmethod
    def require_every_symbology(cls, value: Dict[Symbology, bool]) -> Dict[Symbology, bool]:
        """
        Ensure the map has an explicit entry for every known symbology.

        Raises:
            ValueError: If any symbology is missing
        """
        missing = ALL_SYMBOLOGIES - set(value)
        if missing:
            names = ", ".join(sorted(s.display_name for s in missing))
            raise ValueError(f"Missing symbology entries: {names}")
        return value

    # =========================================================================
    # SETTERS
    # =========================================================================
    def set_symbology_enabled(self, symbology: Symbology, enabled: bool) -> None:
        symbology = Symbology(symbology)
        self.enabled_symbologies[symbology] = bool(enabled)
        logger.debug(f"Symbology {symbology.display_name} {'ENABLED' if enabled else 'DISABLED'}")

    def set_color_inverted_enabled(self, symbology: Symbology, enabled: bool) -> None:
        symbology = Symbology(symbology)
        self.color_inverted[symbology] = bool(enabled)
        logger.debug(f"Color inversion for {symbology.display_name} {'ENABLED' if enabled else 'DISABLED'}")

    def set_max_codes_per_frame(self, max_codes: int) -> None:
        self.max_codes_per_frame = int(max_codes)
        logger.debug(f"Max codes per frame set to: {max_codes}")

    def set_search_whole_image(self, search: bool) -> None:
        self.search_whole_image = bool(search)
        logger.debug(f"Search whole image: {'ENABLED' if search else 'DISABLED'}")

    def set_try_harder_mode(self, try_harder: bool) -> None:
        self.try_harder_mode = bool(try_harder)
        logger.debug(f"Try harder mode: {'ENABLED' if try_harder else 'DISABLED'}")

    # =========================================================================
    # ACCESSORS
    # =========================================================================
    def is_symbology_enabled(self, symbology: Symbology) -> bool:
        return self.enabled_symbologies[Symbology(symbology)]

    def is_color_inverted_enabled(self, symbology: Symbology) -> bool:
        return self.color_inverted[Symbology(symbology)]

    def get_enabled_symbologies(self) -> FrozenSet[Symbology]:
        """Return the set of explicitly enabled symbologies."""
        return frozenset(s for s, enabled in self.enabled_symbologies.items() if enabled)

    def any_color_inversion(self) -> bool:
        """
        True if an enabled symbology requests the inverted pass.

        Inversion flags on disabled symbologies are ignored, since the
        inverted pass could never report them.
        """
        return any(
            self.color_inverted[s] for s in self.get_enabled_symbologies()
        )

    def snapshot(self) -> "ScanSettings":
        """Deep copy used as the immutable view for one scan."""
        return self.model_copy(deep=True)


# =============================================================================
# FACTORY FUNCTIONS AND CONFIGURATION BUNDLES
# =============================================================================

def create_scan_settings(preset: ScanPreset = ScanPreset.SINGLE_FRAME) -> ScanSettings:
    """Create all-disabled settings for the given preset."""
    settings = ScanSettings(preset=preset)
    logger.info(f"Scanner settings created with preset: {settings.preset.value.upper()}")
    return settings


def configure_for_shipping_labels(settings: ScanSettings) -> ScanSettings:
    """
    Enable the symbologies commonly printed on shipping labels.

    Inversion is requested for Code128 and EAN13 only.
    """
    logger.info("📦 Configuring scanner for shipping labels")

    for symbology in (
        Symbology.CODE128,
        Symbology.CODE39,
        Symbology.EAN13,
        Symbology.EAN8,
        Symbology.DATA_MATRIX,
        Symbology.QR_CODE,
    ):
        settings.set_symbology_enabled(symbology, True)

    settings.set_color_inverted_enabled(Symbology.CODE128, True)
    settings.set_color_inverted_enabled(Symbology.EAN13, True)

    settings.set_max_codes_per_frame(10)
    settings.set_search_whole_image(True)
    settings.set_try_harder_mode(True)
    return settings


def configure_for_low_resolution(settings: ScanSettings) -> ScanSettings:
    """
    Enable every symbology useful on low-resolution labels, all of them
    also searched color-inverted, with a higher result cap.
    """
    logger.info("🔍 Configuring scanner for low resolution barcodes")

    for symbology in (
        Symbology.CODE128,
        Symbology.CODE39,
        Symbology.EAN13,
        Symbology.EAN8,
        Symbology.UPCA,
        Symbology.DATA_MATRIX,
        Symbology.QR_CODE,
    ):
        settings.set_symbology_enabled(symbology, True)
        settings.set_color_inverted_enabled(symbology, True)

    settings.set_max_codes_per_frame(20)
    settings.set_search_whole_image(True)
    settings.set_try_harder_mode(True)
    return settings


PRESET_BUNDLES: Dict[str, Callable[[ScanSettings], ScanSettings]] = {
    "shipping_label": configure_for_shipping_labels,
    "low_resolution": configure_for_low_resolution,
}


def configure_from_preset_name(settings: ScanSettings, name: str) -> ScanSettings:
    """
    Apply a named configuration bundle.

    Raises:
        KeyError: If the bundle name is unknown
    """
    return PRESET_BUNDLES[name](settings)
