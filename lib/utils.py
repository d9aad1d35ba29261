# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId


# =============================================================================
# Identifier Utilities
# =============================================================================

def parse_object_id(value: str | ObjectId) -> ObjectId | None:
    """
    Parse a user id into an ObjectId.

    Returns None for anything that is not a valid 24-character hex id, so
    callers can treat a malformed id the same as a missing record.

    Example:
        parse_object_id("65a4f0c2e13b2a9d1c8f4e21")  # ObjectId(...)
        parse_object_id("not-an-id")                 # None
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_document(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a MongoDB document with its _id as a string."""
    result = dict(document)
    if isinstance(result.get("_id"), ObjectId):
        result["_id"] = str(result["_id"])
    return result


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    """
    Current UTC time truncated to milliseconds.

    MongoDB stores datetimes with millisecond precision and returns them
    naive, so timestamps are produced in that same form.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for errors raised outside the HTTP layer.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
