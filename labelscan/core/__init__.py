"""
==============================================================================
Core Package
==============================================================================

Core infrastructure shared by the scanner and the CLI.

Modules:
--------
- exceptions: ScanException class and error factory functions

Usage:
------
    from labelscan.core import ScanException

    # Or use exception factory functions via module
    from labelscan.core import exceptions
    raise exceptions.image_unreadable(path)

==============================================================================
"""

from .exceptions import ScanException

__all__ = [
    "ScanException",
]
