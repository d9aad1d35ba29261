# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Handles user CRUD operations against the MongoDB users collection.
# Separates HTTP concerns from database/business logic.
#
# The collection handle is passed in by the caller (see app/dependencies.py);
# this module never reaches for a global client.
# =============================================================================

import logging
from typing import Any

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from app.exceptions import UserAlreadyExistsError, UserNotFoundError
from core.models.user import UserCreate, UserUpdate
from core.services.user_query import NEWEST_FIRST, build_search_filter
from lib.mongo_client import store_errors
from lib.utils import parse_object_id, serialize_document, utc_now

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user management operations.

    Provides a clean interface between API routes and the database.
    Returned users are plain dicts with a string `_id`.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def list_users(
        self,
        search: str = "",
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List users matching `search`, newest first, one page at a time.

        Args:
            search: Free-text term matched against the list search fields
            page: Page number (1-indexed)
            page_size: Users per page

        Returns:
            Tuple of (users on this page, total matching users)
        """
        query = build_search_filter(search)
        offset = (page - 1) * page_size

        with store_errors("list users"):
            total = self.collection.count_documents(query)
            cursor = (
                self.collection.find(query)
                .sort(NEWEST_FIRST)
                .skip(offset)
                .limit(page_size)
            )
            users = [serialize_document(doc) for doc in cursor]

        logger.debug(f"Listed {len(users)} of {total} users (page={page}, search={search!r})")
        return users, total

    def get_user(self, user_id: str) -> dict[str, Any]:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If the id is malformed or no user has it
        """
        object_id = parse_object_id(user_id)
        if object_id is None:
            raise UserNotFoundError(user_id)

        with store_errors("get user"):
            user = self.collection.find_one({"_id": object_id})

        if not user:
            raise UserNotFoundError(user_id)

        return serialize_document(user)

    def create_user(self, data: UserCreate) -> dict[str, Any]:
        """
        Create a new user.

        The email pre-check gives the common case a clean error; the unique
        index catches the race where two creates pass the check together.

        Raises:
            UserAlreadyExistsError: If the email is already taken
        """
        now = utc_now()
        document = {
            **data.model_dump(exclude_none=True),
            "createdAt": now,
            "updatedAt": now,
        }

        with store_errors("create user"):
            if self.collection.find_one({"email": data.email}, {"_id": 1}):
                raise UserAlreadyExistsError(data.email)

            try:
                result = self.collection.insert_one(document)
            except DuplicateKeyError:
                logger.warning(f"Duplicate email rejected by unique index: {data.email}")
                raise UserAlreadyExistsError(data.email)

        document["_id"] = result.inserted_id
        logger.info(f"Created user: {result.inserted_id}")
        return serialize_document(document)

    def update_user(self, user_id: str, data: UserUpdate) -> dict[str, Any]:
        """
        Apply a partial update to a user.

        Only fields supplied in `data` change. When the email changes, it is
        re-checked against every other user.

        Raises:
            UserNotFoundError: If the user doesn't exist
            UserAlreadyExistsError: If the new email belongs to another user
        """
        object_id = parse_object_id(user_id)
        if object_id is None:
            raise UserNotFoundError(user_id)

        changes = data.changes()

        with store_errors("update user"):
            user = self.collection.find_one({"_id": object_id})
            if not user:
                raise UserNotFoundError(user_id)

            if not changes:
                return serialize_document(user)

            new_email = changes.get("email")
            if new_email and new_email != user.get("email"):
                taken = self.collection.find_one(
                    {"email": new_email, "_id": {"$ne": object_id}},
                    {"_id": 1},
                )
                if taken:
                    raise UserAlreadyExistsError(new_email)

            # updatedAt never moves backwards, even if the clock does
            previous = user.get("updatedAt")
            now = utc_now()
            changes["updatedAt"] = max(now, previous) if previous else now

            try:
                updated = self.collection.find_one_and_update(
                    {"_id": object_id},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                logger.warning(f"Duplicate email rejected by unique index: {new_email}")
                raise UserAlreadyExistsError(new_email or "")

        if not updated:
            # Deleted between the read and the write
            raise UserNotFoundError(user_id)

        logger.info(f"Updated user: {user_id} (fields: {sorted(changes)})")
        return serialize_document(updated)

    def delete_user(self, user_id: str) -> dict[str, Any]:
        """
        Permanently delete a user.

        Returns:
            Confirmation dict with message and id

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        object_id = parse_object_id(user_id)
        if object_id is None:
            raise UserNotFoundError(user_id)

        with store_errors("delete user"):
            result = self.collection.delete_one({"_id": object_id})

        if result.deleted_count == 0:
            raise UserNotFoundError(user_id)

        logger.info(f"Deleted user: {user_id}")
        return {"message": "User removed", "id": user_id}
