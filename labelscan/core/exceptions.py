"""
Scanner Exception Handling

Single ScanException class for all scanner errors, mapped to a process
exit code at the CLI boundary.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ScanException(Exception):
    """
    Unified scanner exception for all error scenarios.

    Provides a consistent error shape for everything that can go wrong
    outside the scan status contract.

    Usage:
        raise ScanException("Could not read image", "IMAGE_UNREADABLE")
        raise ScanException("zxing-cpp missing", "ENGINE_UNAVAILABLE", details={"engine": "zxing"})

    Error Codes:
        Setup:
            - INVALID_RECOGNITION_CONTEXT
            - INVALID_SETTINGS

        Input:
            - BAD_ARGUMENTS
            - IMAGE_UNREADABLE

        Engines (absorbed by the orchestrator, never reach the caller):
            - ENGINE_UNAVAILABLE
            - ENGINE_FAILURE

        General:
            - INTERNAL_ERROR
    """

    def __init__(
        self,
        message: str,
        code: str,
        exit_code: int = 1,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize scanner exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "IMAGE_UNREADABLE")
            exit_code: Process exit code when this reaches the CLI
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.exit_code = exit_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for reporting."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_recognition_context() -> ScanException:
    """Create invalid recognition context exception."""
    return ScanException("Invalid recognition context", "INVALID_RECOGNITION_CONTEXT")


def invalid_settings(reason: str) -> ScanException:
    """Create invalid scan settings exception."""
    return ScanException(
        f"Invalid scan settings: {reason}",
        "INVALID_SETTINGS",
        details={"reason": reason}
    )


def bad_arguments(usage: str) -> ScanException:
    """Create bad command-line arguments exception."""
    return ScanException(usage, "BAD_ARGUMENTS", details={"usage": usage})


def image_unreadable(path: str) -> ScanException:
    """Create unreadable image exception."""
    return ScanException(
        f"Could not read the image: {path}",
        "IMAGE_UNREADABLE",
        details={"path": path}
    )


def engine_unavailable(engine: str, reason: str) -> ScanException:
    """Create decode engine unavailable exception."""
    return ScanException(
        f"Decode engine '{engine}' is not available: {reason}",
        "ENGINE_UNAVAILABLE",
        details={"engine": engine}
    )


def engine_failure(engine: str, error: Exception) -> ScanException:
    """Create decode engine failure exception."""
    return ScanException(
        f"Decode engine '{engine}' failed: {error}",
        "ENGINE_FAILURE",
        details={"engine": engine, "error_type": type(error).__name__}
    )


def internal_error(message: str = "Internal scanner error") -> ScanException:
    """Create internal error exception."""
    return ScanException(message, "INTERNAL_ERROR")
