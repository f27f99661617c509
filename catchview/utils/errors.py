"""Centralized error handling for catchview."""

from enum import Enum
from typing import Any, Dict, Optional

from catchview.utils.logging import get_logger

_logger = None


def _get_logger():
    """Get logger with lazy initialisation."""
    global _logger
    if _logger is None:
        _logger = get_logger(__name__)
    return _logger


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    NETWORK = "network"
    BACKEND = "backend"
    FILE_SYSTEM = "file_system"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


## Custom Exceptions


class CatchViewError(Exception):
    """Base exception for all catchview errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise CatchViewError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Network Errors


class NetworkError(CatchViewError):
    """Base exception for transport-level failures."""

    category = ErrorCategory.NETWORK
    user_message = "A network error occurred"


class BackendConnectionError(NetworkError):
    """Exception when the mail backend cannot be reached."""

    user_message = "Failed to connect to the mail backend"


class NetworkTimeoutError(NetworkError):
    """Exception for network timeout errors."""

    user_message = "The connection timed out"


## Backend Errors


class APIError(CatchViewError):
    """Exception for non-success responses from the mail backend."""

    category = ErrorCategory.BACKEND
    user_message = "The mail backend returned an error"

    def __init__(
        self,
        message: str | None = None,
        status_code: Optional[int] = None,
        details: Dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details)


class NotFoundError(APIError):
    """Exception when a requested message does not exist on the backend."""

    user_message = "Email not found"


class MalformedResponseError(CatchViewError):
    """Exception for response bodies that cannot be decoded."""

    category = ErrorCategory.BACKEND
    user_message = "The mail backend returned an unreadable response"


## File System Errors


class FileSystemError(CatchViewError):
    """Base exception for file system-related errors."""

    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file system error occurred"


## Configuration Errors


class ConfigurationError(CatchViewError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class MissingConfigError(ConfigurationError):
    """Exception for missing configuration settings."""

    user_message = "Missing configuration settings"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Error Handler


class ErrorHandler:
    """Centralized error logging."""

    @staticmethod
    def handle(
        error: Exception, context: str = "", log_traceback: bool = True
    ) -> Dict[str, Any]:
        """Log an error and return its dictionary form."""
        if isinstance(error, CatchViewError):
            _get_logger().error(f"{context}: {error.message}", extra={"context": error.details})
            if log_traceback:
                _get_logger().exception(error)
            return error.to_dict()

        _get_logger().error(f"{context}: {str(error)}")
        if log_traceback:
            _get_logger().exception(error)
        return {
            "error_type": "UnknownError",
            "category": ErrorCategory.UNKNOWN.value,
            "message": str(error),
            "details": {"context": context},
        }


def format_error_message(error: Exception) -> str:
    """Format an error message for display."""
    if isinstance(error, CatchViewError):
        return error.message
    else:
        return "An unexpected error occurred - check logs for details."
