"""
Error handling utilities for Lambda functions.

Provides standardized error responses with error codes.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import ClientError


class AppError(Exception):
    """
    Application error with error code and message.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for a Lambda response."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


class ErrorCode:
    """Standard error codes for the application."""

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # System errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    AWS_SERVICE_ERROR = "AWS_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error response.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary
    """
    if isinstance(error, AppError):
        return error.to_dict()

    if isinstance(error, ClientError):
        return {
            "errorCode": ErrorCode.AWS_SERVICE_ERROR,
            "message": error.response.get("Error", {}).get("Message", str(error)),
            "awsErrorCode": error.response.get("Error", {}).get("Code"),
            "operation": error.operation_name,
        }

    # Unexpected error - return generic message
    return {
        "errorCode": ErrorCode.INTERNAL_ERROR,
        "message": "An unexpected error occurred. Please try again.",
    }
