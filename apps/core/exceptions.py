"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Custom exceptions for the SIKAS system. These provide
             specific error codes and HTTP statuses for access,
             validation and workflow violations.
-------------------------------------------------------------------------
"""
from typing import Optional


class SIKASException(Exception):
    """Base exception for all SIKAS specific errors."""

    error_code: str = "ERR_SIKAS_GENERIC"
    default_message: str = "An error occurred in the SIKAS system."
    status_code: int = 400

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        """
        Initialize SIKAS exception.

        Args:
            message: Custom error message. If None, uses default_message.
            details: Additional context dictionary (e.g. per-field errors).
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# Access-related Exceptions
class UnauthenticatedException(SIKASException):
    """Raised when no authenticated session is present."""

    error_code = "ERR_UNAUTHENTICATED"
    default_message = "Authentication required."
    status_code = 401


class UnauthorizedRoleException(SIKASException):
    """Raised when a user lacks the required role for an action."""

    error_code = "ERR_UNAUTHORIZED_ROLE"
    default_message = "You do not have the required role to perform this action."
    status_code = 403


class NotOwnerException(SIKASException):
    """Raised when a user acts on a resource they do not own."""

    error_code = "ERR_NOT_OWNER"
    default_message = "You can only act on your own requests."
    status_code = 403


class CsrfFailedException(SIKASException):
    """Raised when a session-authenticated write carries no valid CSRF token."""

    error_code = "ERR_CSRF_FAILED"
    default_message = "CSRF token missing or incorrect. Fetch /api/auth/me/ to obtain the csrftoken cookie."
    status_code = 403


# Data Validation Exceptions
class ValidationFailedException(SIKASException):
    """Raised when input fails structural or business validation."""

    error_code = "ERR_VALIDATION"
    default_message = "The submitted data is invalid."
    status_code = 400


class InvalidFileTypeException(SIKASException):
    """Raised when an uploaded proof is not JPEG, PNG or PDF."""

    error_code = "ERR_INVALID_FILE_TYPE"
    default_message = "Only JPEG, PNG or PDF files are accepted."
    status_code = 400


class FileTooLargeException(SIKASException):
    """Raised when an uploaded proof exceeds the size limit."""

    error_code = "ERR_FILE_TOO_LARGE"
    default_message = "The uploaded file exceeds the 5MB limit."
    status_code = 400


class ResourceNotFoundException(SIKASException):
    """Raised when an id does not resolve to a record."""

    error_code = "ERR_NOT_FOUND"
    default_message = "The requested resource was not found."
    status_code = 404


# Workflow-related Exceptions
class WorkflowTransitionException(SIKASException):
    """Raised when an invalid state transition is attempted."""

    error_code = "ERR_INVALID_TRANSITION"
    default_message = "Invalid workflow transition attempted."
    status_code = 409


# Budget-related Exceptions
class BudgetExceededException(SIKASException):
    """Raised when a disbursement exceeds the RKAS item allocation."""

    error_code = "ERR_BUDGET_EXCEEDED"
    default_message = "The disbursement exceeds the allocated budget for this RKAS item."
    status_code = 422
