"""
Error types raised while constructing the goals stack.

Only local configuration problems are detected here. Everything else is
validated by CloudFormation at deploy time and surfaced unchanged.
"""

from typing import Any, Dict, Optional


class StackConfigError(Exception):
    """
    Configuration error with error code and message.

    Raised before any resource is registered so synthesis fails fast.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for log output."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


class ErrorCode:
    """Standard error codes for stack construction."""

    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_PROJECT_NAME = "INVALID_PROJECT_NAME"
    NAME_SPACE_EXHAUSTED = "NAME_SPACE_EXHAUSTED"
