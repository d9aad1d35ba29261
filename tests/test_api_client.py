# =============================================================================
# tests/test_api_client.py - UsersApiClient Tests
# =============================================================================
# Runs the Python client against the real app: FastAPI's TestClient is an
# httpx.Client, so it is handed to UsersApiClient as its transport.
# =============================================================================

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.main import app
from client import ApiClientError, UsersApiClient


@pytest.fixture
def api(client):
    """UsersApiClient talking to the app through the overridden TestClient."""
    http_client = TestClient(app, base_url="http://testserver/api")
    with UsersApiClient(http_client=http_client) as users_api:
        yield users_api


class TestUsersApiClient:
    """Tests for UsersApiClient CRUD calls."""

    def test_create_get_update_delete(self, api):
        created = api.create_user({"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"})

        assert api.get_user(created["_id"])["email"] == "ada@example.com"

        updated = api.update_user(created["_id"], {"city": "London"})
        assert updated["city"] == "London"

        assert api.delete_user(created["_id"])["message"] == "User removed"

        with pytest.raises(ApiClientError) as exc_info:
            api.get_user(created["_id"])
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "USER_NOT_FOUND"

    def test_get_users_sends_query_params(self, api, make_users):
        make_users(12)

        page = api.get_users(page=2, limit=5, search="example.com")

        assert page["total"] == 12
        assert page["page"] == 2
        assert len(page["data"]) == 5
        assert page["totalPages"] == 3

    def test_search_with_reserved_characters(self, api, make_users):
        make_users(2)

        page = api.get_users(search="a&limit=1")

        assert page["total"] == 0
        assert page["limit"] == 10

    def test_duplicate_email_error(self, api):
        api.create_user({"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"})

        with pytest.raises(ApiClientError) as exc_info:
            api.create_user({"first_name": "Ada", "last_name": "L", "email": "ADA@example.com"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "USER_ALREADY_EXISTS"
        assert "already exists" in str(exc_info.value)


class TestExportUsersCsv:
    """Tests for UsersApiClient.export_users_csv."""

    def test_downloads_to_file(self, api, make_users, tmp_path):
        make_users(3)

        path = api.export_users_csv(tmp_path / "users.csv")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert lines[0].startswith("First Name,Last Name,Email")

    def test_no_matches(self, api, tmp_path):
        destination = tmp_path / "users.csv"

        with pytest.raises(ApiClientError) as exc_info:
            api.export_users_csv(destination, search="nobody")

        assert exc_info.value.code == "NO_USERS_TO_EXPORT"
        assert not destination.exists()


class TestConnectionErrors:
    """Tests for transport failures."""

    def test_unreachable_server(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http_client = httpx.Client(base_url="http://localhost:5000/api", transport=httpx.MockTransport(refuse))

        with pytest.raises(ApiClientError) as exc_info:
            UsersApiClient(http_client=http_client).get_user(str(ObjectId()))

        assert exc_info.value.code == "CONNECTION_ERROR"

    def test_non_json_error_body(self):
        def bad_gateway(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        http_client = httpx.Client(base_url="http://localhost:5000/api", transport=httpx.MockTransport(bad_gateway))

        with pytest.raises(ApiClientError) as exc_info:
            UsersApiClient(http_client=http_client).get_users()

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "HTTP_ERROR"
