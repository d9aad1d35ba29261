# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces MongoDB with mongomock collections
# - Provides a TestClient wired to those collections
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DATABASE", "user_directory_test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_export_service, get_users_collection
from app.main import app
from core.models.user import UserCreate
from core.services.export_service import ExportService
from core.services.user_service import UserService
from lib.mongo_client import USERS_COLLECTION, ensure_user_indexes


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def users_collection():
    """In-memory users collection with the production indexes."""
    collection = mongomock.MongoClient()["user_directory_test"][USERS_COLLECTION]
    ensure_user_indexes(collection)
    return collection


@pytest.fixture
def user_service(users_collection):
    return UserService(users_collection)


@pytest.fixture
def export_dir(tmp_path):
    """Directory that receives export files; should be empty after each export."""
    directory = tmp_path / "exports"
    directory.mkdir()
    return directory


@pytest.fixture
def export_service(users_collection, export_dir):
    return ExportService(users_collection, export_dir=export_dir, batch_size=4)


# =============================================================================
# Sample Data
# =============================================================================

@pytest.fixture
def sample_user_data():
    """A complete, valid user payload."""
    return {
        "first_name": "Marie",
        "last_name": "Curie",
        "email": "Marie.Curie@Example.org",
        "phone": "+33 1 44 27 00 00",
        "address": "11 Rue Pierre et Marie Curie",
        "city": "Paris",
        "state": "Ile-de-France",
        "zip_code": "75005",
        "country": "France",
    }


@pytest.fixture
def make_users(user_service):
    """Create `count` users named user0..userN, returning them oldest first."""

    def _make_users(count: int, **overrides) -> list[dict]:
        created = []
        for i in range(count):
            data = {
                "first_name": f"First{i}",
                "last_name": f"Last{i}",
                "email": f"user{i}@example.com",
                **overrides,
            }
            created.append(user_service.create_user(UserCreate(**data)))
        return created

    return _make_users


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def client(users_collection, export_service):
    """
    TestClient with MongoDB replaced by mongomock.

    Not used as a context manager, so the lifespan handler (which would
    connect to a real server) never runs.
    """
    app.dependency_overrides[get_users_collection] = lambda: users_collection
    app.dependency_overrides[get_export_service] = lambda: export_service
    yield TestClient(app)
    app.dependency_overrides.clear()
