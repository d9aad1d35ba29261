# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# - user.py: User create/update/response schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    EMAIL_PATTERN,
    UserCreate,
    UserDeleteResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
    normalize_email,
)

__all__ = [
    "EMAIL_PATTERN",
    "UserCreate",
    "UserDeleteResponse",
    "UserListResponse",
    "UserResponse",
    "UserUpdate",
    "normalize_email",
]
