"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_SIGNED_IN = "NOT_SIGNED_IN"
    SIGN_IN_FAILED = "SIGN_IN_FAILED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (422)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    PROFILE_ALREADY_COMPLETE = "PROFILE_ALREADY_COMPLETE"
    INVALID_VIEW_STATE = "INVALID_VIEW_STATE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Store errors (503)
    READ_FAILED = "READ_FAILED"
    WRITE_FAILED = "WRITE_FAILED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Request carries no usable identity."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthFailure(AppException):
    """The identity provider rejected a sign-in credential."""

    def __init__(
        self,
        message: str = "Failed to sign in with Google. Please try again.",
    ) -> None:
        super().__init__(
            error_code=ErrorCode.SIGN_IN_FAILED,
            message=message,
            status_code=401,
        )


class ValidationFailure(AppException):
    """A form field is missing or invalid; detected before any write."""

    def __init__(self, field: str, message: str = "Please fill in all fields.") -> None:
        self.field = field
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=422,
            details={"field": field},
        )


class WriteFailure(AppException):
    """The store rejected a write."""

    def __init__(self, path: str, message: str = "Failed to save. Please try again.") -> None:
        super().__init__(
            error_code=ErrorCode.WRITE_FAILED,
            message=message,
            status_code=503,
            details={"path": path},
        )


class ReadFailure(AppException):
    """The store could not serve a read."""

    def __init__(self, path: str) -> None:
        super().__init__(
            error_code=ErrorCode.READ_FAILED,
            message=f"Failed to read {path}",
            status_code=503,
            details={"path": path},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class ProfileAlreadyCompleteError(AppException):
    """Profiles are written once and never mutated afterwards."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_ALREADY_COMPLETE,
            message="Profile is already complete",
            status_code=409,
            details={"user_id": user_id},
        )


class InvalidViewStateError(AppException):
    """The action is not available in the current view state."""

    def __init__(self, state: str, action: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_VIEW_STATE,
            message=f"Cannot {action} while in state {state}",
            status_code=409,
            details={"state": state, "action": action},
        )
