# =============================================================================
# tests/test_responses.py - TemporaryFileResponse Tests
# =============================================================================
# The export file must be deleted on every exit path: successful download,
# failure before the response starts, and failure mid-stream.
# =============================================================================

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.responses import TemporaryFileResponse


def make_file(tmp_path, content: str = "First Name\nAda\n"):
    path = tmp_path / "users-test.csv"
    path.write_text(content, encoding="utf-8")
    return path


def serve(path) -> TestClient:
    app = FastAPI()

    @app.get("/download")
    def download():
        return TemporaryFileResponse(path, media_type="text/csv", filename="users.csv")

    return TestClient(app)


class TestTemporaryFileResponse:
    """Tests for TemporaryFileResponse."""

    def test_sends_then_deletes(self, tmp_path):
        path = make_file(tmp_path)

        response = serve(path).get("/download")

        assert response.status_code == 200
        assert response.text == "First Name\nAda\n"
        assert "users.csv" in response.headers["content-disposition"]
        assert response.headers["content-type"].startswith("text/csv")
        assert not path.exists()

    def test_failure_before_start_sends_json_error(self, tmp_path):
        missing = tmp_path / "users-missing.csv"

        response = serve(missing).get("/download")

        assert response.status_code == 500
        assert response.json()["code"] == "EXPORT_DELIVERY_FAILED"
        assert response.json()["detail"] == "Error downloading file"

    def test_failure_mid_stream_still_deletes(self, tmp_path):
        path = make_file(tmp_path)
        response = TemporaryFileResponse(path, media_type="text/csv", filename="users.csv")
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/download",
            "query_string": b"",
            "headers": [],
        }

        async def receive():
            await asyncio.Event().wait()

        async def send(message):
            if message["type"] == "http.response.body":
                raise OSError("client disconnected")

        with pytest.raises(OSError):
            asyncio.run(response(scope, receive, send))

        assert not path.exists()

    def test_custom_cleanup(self, tmp_path):
        path = make_file(tmp_path)
        cleaned = []

        app = FastAPI()

        @app.get("/download")
        def download():
            return TemporaryFileResponse(path, filename="users.csv", cleanup=cleaned.append)

        TestClient(app).get("/download")

        assert cleaned == [path]
