# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the caller what failed and, where possible, how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class UserDirectoryException(Exception):
    """
    Base exception for the User Directory API.

    All custom exceptions inherit from this class and carry the HTTP status
    they should be reported with.
    """

    def __init__(
        self,
        message: str,
        code: str = "USER_DIRECTORY_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(UserDirectoryException):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the user id is correct and the user hasn't been deleted",
            details={"user_id": user_id}
        )


class UserAlreadyExistsError(UserDirectoryException):
    """Raised when a write would duplicate an existing email."""

    def __init__(self, email: str):
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=400,
            suggestion="Use a different email address or update the existing user",
            details={"email": email}
        )


class InvalidUserDataError(UserDirectoryException):
    """Raised when required fields are missing or malformed."""

    def __init__(self, errors: list[dict[str, Any]] | None = None):
        super().__init__(
            message="Invalid user data",
            code="INVALID_INPUT",
            status_code=400,
            suggestion="first_name, last_name and a valid email are required",
            details={"errors": errors} if errors else None
        )


# =============================================================================
# Export Exceptions
# =============================================================================

class NoUsersToExportError(UserDirectoryException):
    """Raised when an export matches no users."""

    def __init__(self, search: str):
        super().__init__(
            message="No users found to export",
            code="NO_USERS_TO_EXPORT",
            status_code=404,
            suggestion="Broaden or clear the search term",
            details={"search": search}
        )


class ExportWriteError(UserDirectoryException):
    """Raised when the CSV file cannot be written."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to write CSV export: {error}",
            code="EXPORT_WRITE_FAILED",
            status_code=500,
            suggestion="Check that EXPORT_DIR exists and is writable",
            details={"error": error}
        )


class ExportDeliveryFailedError(UserDirectoryException):
    """Raised when a finished CSV file cannot be sent to the client."""

    def __init__(self, error: str):
        super().__init__(
            message="Error downloading file",
            code="EXPORT_DELIVERY_FAILED",
            status_code=500,
            suggestion="Try the export again",
            details={"error": error}
        )


# =============================================================================
# Store Exceptions
# =============================================================================

class StoreUnavailableError(UserDirectoryException):
    """Raised when MongoDB cannot be reached."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Database unavailable during {operation}",
            code="STORE_UNAVAILABLE",
            status_code=503,
            suggestion="Check MONGODB_URI and that the MongoDB server is running",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def user_directory_exception_handler(
    request: Request,
    exc: UserDirectoryException
) -> JSONResponse:
    """
    Convert UserDirectoryException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body/query validation errors.

    Reported as INVALID_INPUT with status 400 rather than FastAPI's default 422.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return await user_directory_exception_handler(request, InvalidUserDataError(errors))
