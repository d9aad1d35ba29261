# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the User Directory API:
# - test_models.py: Pydantic schema validation
# - test_user_query.py: Search filters and pagination helpers
# - test_user_service.py: User CRUD against a mongomock collection
# - test_export_service.py: CSV export file lifecycle
# - test_responses.py: Self-cleaning download response
# - test_users_api.py: HTTP endpoints through FastAPI's TestClient
# - test_api_client.py: Python client against the app
# - test_health.py: Health endpoints
# - test_mongo_client.py: Index creation and error translation
#
# Run tests with: pytest
# =============================================================================
