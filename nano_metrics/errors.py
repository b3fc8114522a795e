"""
Error types for nano-metrics.
"""

from typing import Dict, Any, Optional


class MetricsError(Exception):
    """Base exception for metrics initialization failures."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a loggable mapping."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class RegistrationError(MetricsError):
    """Catalog validation or collector registration errors."""

    def __init__(self, message: str = "Metric registration failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("REGISTRATION_ERROR", message, details)


class ExpositionError(MetricsError):
    """Scrape endpoint startup errors."""

    def __init__(self, message: str = "Metrics endpoint failed to start", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXPOSITION_ERROR", message, details)
