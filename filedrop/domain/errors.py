"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions can have infrastructure concerns like logging.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    FILE_TOO_LARGE = "file_too_large"
    INVALID_FILENAME = "invalid_filename"
    MISSING_PAYLOAD = "missing_payload"
    STORAGE_ERROR = "storage_error"
    FILE_NOT_FOUND = "file_not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST = "invalid_request"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.FILE_TOO_LARGE: {
        "title": "File Too Large",
        "message": "The uploaded file exceeds the maximum allowed size.",
        "action": "Compress the file or split it before uploading again.",
    },
    ErrorCategory.INVALID_FILENAME: {
        "title": "Invalid Filename",
        "message": "The uploaded file must have a non-empty name.",
        "action": "Give the file a name and try again.",
    },
    ErrorCategory.MISSING_PAYLOAD: {
        "title": "No File Provided",
        "message": "The request did not contain a file.",
        "action": "Send the file in the multipart form field 'file'.",
    },
    ErrorCategory.STORAGE_ERROR: {
        "title": "Storage Error",
        "message": "The file could not be saved on the server.",
        "action": "Please try again later.",
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "The requested file does not exist or is no longer available.",
        "action": "Ask the sender to upload the file again.",
    },
    ErrorCategory.UNAUTHORIZED: {
        "title": "Unauthorized",
        "message": "Invalid API key or unauthorized client.",
        "action": "Send a valid key in the 'Authorization: Bearer <key>' header.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class EntropySourceError(DomainError):
    """
    Raised when the cryptographic random source cannot supply bytes.

    Fatal for the request; there is no fallback to weaker randomness.
    """
    pass


class PayloadTooLargeError(DomainError):
    """Raised when an upload exceeds the configured byte ceiling."""

    category = ErrorCategory.FILE_TOO_LARGE

    def __init__(self, message: str, max_bytes: int, original_error: Exception = None):
        super().__init__(message, original_error)
        self.max_bytes = max_bytes


class InvalidFilenameError(DomainError):
    """Raised when the client-supplied filename is empty or missing."""

    category = ErrorCategory.INVALID_FILENAME


class MissingPayloadError(DomainError):
    """Raised when an upload request carries no file."""

    category = ErrorCategory.MISSING_PAYLOAD


class StorageWriteError(DomainError):
    """
    Raised when writing an upload to storage fails.

    The partial file has already been removed and nothing was registered.
    """

    category = ErrorCategory.STORAGE_ERROR


class TokenCollisionError(DomainError):
    """Raised when a token is registered twice. The existing entry is kept."""
    pass


class TransferNotFoundError(DomainError):
    """
    Raised when a token does not resolve to a file.

    Covers unknown, malformed and already consumed tokens alike.
    """

    category = ErrorCategory.FILE_NOT_FOUND


class StreamInterruptedError(DomainError):
    """
    Raised when a download stream fails after the token was consumed.

    The stored file is deleted before this is raised.
    """
    pass


# ============================================================================
# Application Layer Exceptions (Can have infrastructure concerns)
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    This is an application-layer concern that bridges domain errors
    with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information returned to the client
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        # Get user-friendly message
        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        payload = {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        if self.context:
            payload["details"] = self.context
        return payload


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    The technical message is never part of the payload, so internal paths
    and the state of a token do not leak to the client.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
