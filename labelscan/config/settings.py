"""
==============================================================================
Application Settings Module
==============================================================================

Process-level configuration for the label scanner using Pydantic Settings.

This module implements the Singleton pattern to ensure a single global
configuration instance throughout the process lifecycle.

Features:
---------
- Environment variable loading with type validation (prefix LABELSCAN_)
- .env file support for local development
- Computed properties for derived values

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Note:
-----
These settings describe the *process* (logging, output files, engine
budgets). The per-scan symbology configuration lives in
``labelscan.scanner.settings.ScanSettings`` and is owned by the caller.

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Process settings loaded from environment variables.

    Attributes:
        app_name: Display name logged in the CLI startup banner
        debug: Enable debug mode for verbose logging
        log_level: Root log level when debug is off
        preset: Scanner configuration bundle used by the CLI
        output_image: File written with overlays after a successful scan
        debug_image: File written when a scan finds nothing or fails
        error_debug_image: File written when reporting itself faults
        matrix_timeout_ms: Time budget of the region DataMatrix decoder
        header_title: Title shown in the overlay header band
        report_directory: Optional directory for scan report files

    Example:
        >>> settings = Settings()
        >>> print(settings.output_image)
        'labelscan_output.jpg'
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_prefix="LABELSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Label Barcode Scanner",
        description="Display name logged in the startup banner"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level used when debug mode is off"
    )

    # =========================================================================
    # SCAN SETTINGS
    # =========================================================================
    preset: str = Field(
        default="low_resolution",
        description="Configuration bundle: shipping_label or low_resolution"
    )

    matrix_timeout_ms: int = Field(
        default=2000,
        ge=1,
        le=60000,
        description="Time budget for the region DataMatrix decoder"
    )

    header_title: str = Field(
        default="LABELSCAN",
        description="Title shown in the overlay header band"
    )

    # =========================================================================
    # OUTPUT SETTINGS
    # =========================================================================
    output_image: str = Field(
        default="labelscan_output.jpg",
        description="Annotated image written after a successful scan"
    )

    debug_image: str = Field(
        default="labelscan_debug.jpg",
        description="Annotated image written when no codes were found"
    )

    error_debug_image: str = Field(
        default="labelscan_error_debug.jpg",
        description="Partially annotated image written when reporting fails"
    )

    report_directory: Optional[str] = Field(
        default=None,
        description="Directory for scan report files (disabled if unset)"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """
        Validate and normalize the log level name.

        Raises:
            ValueError: If the level is not a standard logging level
        """
        normalized = value.upper().strip()
        valid_levels = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

        if normalized not in valid_levels:
            raise ValueError(
                f"Unsupported log level: {value}. "
                f"Supported: {', '.join(sorted(valid_levels))}"
            )

        return normalized

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, value: str) -> str:
        """Normalize the preset name, falling back to low_resolution."""
        valid_presets = {"shipping_label", "low_resolution"}
        normalized = value.lower().strip().replace("-", "_")

        if normalized not in valid_presets:
            logger.warning(
                f"Unknown preset '{value}', defaulting to 'low_resolution'"
            )
            return "low_resolution"

        return normalized

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def effective_log_level(self) -> int:
        """Numeric log level, DEBUG whenever debug mode is on."""
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level)

    @property
    def report_path(self) -> Optional[Path]:
        """
        Get report directory as Path object.

        Creates the directory if it is configured and missing.

        Returns:
            Path object, or None when reports are not written to disk
        """
        if not self.report_directory:
            return None
        path = Path(self.report_directory)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"preset={self.preset!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Uses lru_cache to ensure only one Settings instance is created.
    Tests call ``get_settings.cache_clear()`` after changing the environment.

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
