# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the user schemas:
# - Required fields and email format are enforced
# - Strings are trimmed and emails lower-cased
# - Partial updates only report supplied fields
# - Responses serialize with the _id / createdAt / updatedAt wire names
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError

from core.models import (
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
    normalize_email,
)


# =============================================================================
# Email Tests
# =============================================================================

class TestNormalizeEmail:
    """Tests for email normalization and validation."""

    @pytest.mark.parametrize("email", [
        "ada@example.com",
        "first.last@example.org",
        "first-last@sub.example.co.uk",
        "user_1@example.io",
    ])
    def test_accepts_valid_addresses(self, email):
        assert normalize_email(email) == email

    def test_trims_and_lowercases(self):
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"

    @pytest.mark.parametrize("email", [
        "",
        "plainaddress",
        "@example.com",
        "ada@",
        "ada@example",
        "ada@example.c",
        "ada@example.commerce",
        "ada..lovelace@example.com",
        "ada lovelace@example.com",
        "josé@example.com",
        "ada@exämple.com",
    ])
    def test_rejects_invalid_addresses(self, email):
        with pytest.raises(ValueError):
            normalize_email(email)

    def test_long_invalid_input_fails_fast(self):
        """A long near-miss must not trigger catastrophic backtracking."""
        with pytest.raises(ValueError):
            normalize_email("a" * 5000 + "@" + "b" * 5000 + "!")


# =============================================================================
# UserCreate Tests
# =============================================================================

class TestUserCreate:
    """Tests for UserCreate model."""

    def test_valid_user(self, sample_user_data):
        user = UserCreate(**sample_user_data)

        assert user.first_name == "Marie"
        assert user.email == "marie.curie@example.org"
        assert user.zip_code == "75005"

    def test_optional_fields_default_to_none(self):
        user = UserCreate(first_name="Ada", last_name="Lovelace", email="ada@example.com")

        assert user.phone is None
        assert user.country is None

    def test_strings_are_trimmed(self):
        user = UserCreate(first_name="  Ada ", last_name=" Lovelace", email="ada@example.com", city=" London ")

        assert user.first_name == "Ada"
        assert user.last_name == "Lovelace"
        assert user.city == "London"

    @pytest.mark.parametrize("missing", ["first_name", "last_name", "email"])
    def test_required_fields(self, sample_user_data, missing):
        del sample_user_data[missing]

        with pytest.raises(ValidationError):
            UserCreate(**sample_user_data)

    def test_blank_name_rejected(self, sample_user_data):
        sample_user_data["first_name"] = "   "

        with pytest.raises(ValidationError):
            UserCreate(**sample_user_data)

    def test_invalid_email_rejected(self, sample_user_data):
        sample_user_data["email"] = "not-an-email"

        with pytest.raises(ValidationError):
            UserCreate(**sample_user_data)

    def test_timestamps_and_id_are_ignored(self, sample_user_data):
        user = UserCreate(**sample_user_data, _id="abc", createdAt="2020-01-01T00:00:00Z")

        dumped = user.model_dump()
        assert "_id" not in dumped
        assert "createdAt" not in dumped


# =============================================================================
# UserUpdate Tests
# =============================================================================

class TestUserUpdate:
    """Tests for UserUpdate model."""

    def test_changes_only_include_supplied_fields(self):
        update = UserUpdate(city="Lyon")

        assert update.changes() == {"city": "Lyon"}

    def test_null_fields_are_not_changes(self):
        update = UserUpdate(city="Lyon", phone=None)

        assert update.changes() == {"city": "Lyon"}

    def test_empty_update(self):
        assert UserUpdate().changes() == {}

    def test_email_is_normalized(self):
        assert UserUpdate(email=" New@Example.com").changes() == {"email": "new@example.com"}

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            UserUpdate(email="nope")

    def test_blank_required_field_rejected(self):
        with pytest.raises(ValidationError):
            UserUpdate(last_name="")


# =============================================================================
# Response Model Tests
# =============================================================================

class TestUserResponse:
    """Tests for UserResponse serialization."""

    def test_serializes_with_wire_names(self):
        object_id = ObjectId()
        created = datetime(2024, 1, 15, 10, 30)

        response = UserResponse.model_validate({
            "_id": object_id,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "createdAt": created,
            "updatedAt": created,
        })
        dumped = response.model_dump(by_alias=True)

        assert dumped["_id"] == str(object_id)
        assert dumped["createdAt"] == created.replace(tzinfo=timezone.utc)
        assert dumped["updatedAt"].tzinfo is not None
        assert dumped["phone"] is None

    def test_list_response_total_pages_alias(self):
        page = UserListResponse(data=[], total=15, page=2, limit=10, total_pages=2)

        assert page.model_dump(by_alias=True)["totalPages"] == 2
