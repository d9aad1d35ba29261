# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - mongo_client.py: MongoDB client creation, indexes, error translation
# - utils.py: Shared utilities (ObjectId parsing, timestamps, base error)
# =============================================================================

from lib.mongo_client import (
    USERS_COLLECTION,
    create_mongo_client,
    ensure_user_indexes,
    store_errors,
)
from lib.utils import ApplicationError, parse_object_id, serialize_document, utc_now

__all__ = [
    "USERS_COLLECTION",
    "create_mongo_client",
    "ensure_user_indexes",
    "store_errors",
    "ApplicationError",
    "parse_object_id",
    "serialize_document",
    "utc_now",
]
