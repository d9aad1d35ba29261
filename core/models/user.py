# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - UserCreate: Input for creating a user (required fields + email format)
# - UserUpdate: Partial input for updating a user
# - UserResponse: A stored user as returned to clients
# - UserListResponse: One page of users plus pagination totals
# - UserDeleteResponse: Confirmation returned after a delete
#
# Persisted documents use the keys first_name ... country, plus the
# store-assigned _id, createdAt and updatedAt. The response models keep those
# wire names through aliases so existing clients keep working.
# =============================================================================

import re
from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Same language as ^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$ without the
# nested optional quantifiers that make that form backtrack exponentially.
# \w is ASCII-only, so accented letters are rejected.
EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)


def normalize_email(value: str) -> str:
    """
    Trim, lower-case and validate an email address.

    Raises:
        ValueError: If the address doesn't match EMAIL_PATTERN
    """
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please enter a valid email address")
    return email


class UserCreate(BaseModel):
    """
    Schema for creating a new user.

    All strings are trimmed. Timestamps and the id are not accepted; the
    persistence layer assigns them.

    Example:
        {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "city": "London"
        }
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    first_name: str = Field(..., min_length=1, description="First name (required)")
    last_name: str = Field(..., min_length=1, description="Last name (required)")
    email: str = Field(..., description="Unique email address (stored lower-cased)")
    phone: str | None = Field(default=None)
    address: str | None = Field(default=None)
    city: str | None = Field(default=None)
    state: str | None = Field(default=None)
    zip_code: str | None = Field(default=None)
    country: str | None = Field(default=None)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)


class UserUpdate(BaseModel):
    """
    Schema for a partial user update.

    Only fields present in the request body (and not null) are applied;
    everything else on the stored user stays untouched.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None)
    phone: str | None = Field(default=None)
    address: str | None = Field(default=None)
    city: str | None = Field(default=None)
    state: str | None = Field(default=None)
    zip_code: str | None = Field(default=None)
    country: str | None = Field(default=None)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_email(value)

    def changes(self) -> dict[str, str]:
        """The supplied, non-null fields as a $set payload."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserResponse(BaseModel):
    """
    Schema for returning a stored user.

    Serialized with the _id / createdAt / updatedAt keys the browser client
    reads.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Store-assigned identifier")
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value) if isinstance(value, ObjectId) else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # MongoDB hands back naive UTC datetimes
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class UserListResponse(BaseModel):
    """
    One page of users.

    Example:
        {
            "data": [...],
            "total": 15,
            "page": 2,
            "limit": 10,
            "totalPages": 2
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    data: list[UserResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Users matching the search")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    total_pages: int = Field(default=0, ge=0, alias="totalPages")


class UserDeleteResponse(BaseModel):
    """Confirmation returned after a user is deleted."""
    message: str = Field(default="User removed")
    id: str
