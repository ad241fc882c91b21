"""
==============================================================================
Configuration Package
==============================================================================

Centralized process configuration using Pydantic Settings.

Usage:
------
    from labelscan.config import get_settings, Settings

    settings = get_settings()
    print(settings.output_image)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
