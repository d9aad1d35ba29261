# =============================================================================
# lib/mongo_client.py - MongoDB Client Helpers
# =============================================================================
# This module owns everything that touches the pymongo driver directly:
# - Creating the client from settings
# - Declaring the indexes the users collection relies on
# - Translating driver connectivity failures into StoreUnavailableError
#
# The client is NOT a global. app/main.py creates it in the lifespan handler
# and routes receive collections through app/dependencies.py.
#
# Usage:
#   client = create_mongo_client(settings)
#   users = client[settings.MONGODB_DATABASE][USERS_COLLECTION]
#   ensure_user_indexes(users)
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure

from app.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def create_mongo_client(settings: Settings) -> MongoClient:
    """
    Create a MongoDB client from application settings.

    pymongo connects lazily, so this never blocks; the first operation
    (normally ensure_user_indexes at startup) is what reaches the server.
    """
    client: MongoClient = MongoClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        appname="user-directory-api",
    )
    logger.info(f"MongoDB client created for database: {settings.MONGODB_DATABASE}")
    return client


def ensure_user_indexes(collection: Collection) -> None:
    """
    Create the indexes the users collection depends on.

    The unique email index is the authoritative duplicate guard; the
    application-level check in UserService only gives a friendlier error
    earlier. createdAt backs the newest-first sort used by list and export.

    Raises:
        StoreUnavailableError: If MongoDB cannot be reached
    """
    with store_errors("index creation"):
        collection.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        collection.create_index([("createdAt", DESCENDING)], name="created_at_desc")
    logger.info(f"Indexes ensured on collection: {collection.name}")


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Map pymongo connectivity failures to StoreUnavailableError.

    Only ConnectionFailure (which covers server selection timeouts and
    network errors) is translated; other driver errors propagate unchanged.
    Nothing is retried here.
    """
    try:
        yield
    except ConnectionFailure as e:
        logger.error(f"MongoDB unavailable during {operation}: {e}")
        raise StoreUnavailableError(operation, str(e)) from e
