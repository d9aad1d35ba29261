# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The MongoDB database lives on app.state (set up by the lifespan handler in
# app/main.py). Tests replace get_users_collection or get_database through
# app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request
from pymongo.collection import Collection
from pymongo.database import Database

from app.config import settings
from core.services.export_service import ExportService
from core.services.user_service import UserService
from lib.mongo_client import USERS_COLLECTION


def get_database(request: Request) -> Database:
    """
    Get the MongoDB database opened at startup.
    """
    return request.app.state.database


DatabaseDep = Annotated[Database, Depends(get_database)]


def get_users_collection(database: DatabaseDep) -> Collection:
    """Get the users collection."""
    return database[USERS_COLLECTION]


UsersCollectionDep = Annotated[Collection, Depends(get_users_collection)]


def get_user_service(collection: UsersCollectionDep) -> UserService:
    return UserService(collection)


def get_export_service(collection: UsersCollectionDep) -> ExportService:
    return ExportService(
        collection,
        export_dir=settings.EXPORT_DIR,
        batch_size=settings.EXPORT_BATCH_SIZE,
    )


# Type aliases for dependency injection
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
