from typing import Dict, Any, Optional


class CampaignBuilderError(Exception):
    """Base class for campaign builder errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the error.

        Args:
            message: Error message describing the failure
            details: Optional dictionary containing error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CampaignBuilderError):
    """Raised when a caller passes an unusable option (unknown mode, negative delay)."""
    pass
