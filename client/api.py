# =============================================================================
# client/api.py - User Directory HTTP Client
# =============================================================================
# A thin httpx wrapper around the /api/users endpoints, for scripts and other
# services that talk to the User Directory API.
#
# Usage:
#   with UsersApiClient("http://localhost:5000/api") as api:
#       page = api.get_users(page=1, limit=10, search="paris")
#       api.export_users_csv("users.csv", search="paris")
# =============================================================================

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


class ApiClientError(ApplicationError):
    """
    Error returned by the User Directory API (or raised reaching it).

    Carries the HTTP status and the server's error code, e.g.
    404 / USER_NOT_FOUND or 400 / USER_ALREADY_EXISTS.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str = "API_CLIENT_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiClientError:
        """Build an error from a non-2xx API response."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        return cls(
            message=body.get("detail") or f"HTTP {response.status_code}",
            status_code=response.status_code,
            code=body.get("code", "HTTP_ERROR"),
            suggestion=body.get("suggestion"),
            details=body.get("details"),
        )


class UsersApiClient:
    """
    Client for the User Directory API.

    Pass `http_client` to reuse an existing httpx.Client (its base_url must
    point at the API root, e.g. http://host/api); otherwise one is created
    and closed with this client.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    def __enter__(self) -> UsersApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiClientError(
                message=f"Request to {url} failed: {e}",
                code="CONNECTION_ERROR",
                suggestion="Check that the API is running and the base URL is correct",
            ) from e

        if response.is_error:
            raise ApiClientError.from_response(response)
        return response.json()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_users(self, page: int = 1, limit: int = 10, search: str = "") -> dict[str, Any]:
        """
        Fetch one page of users.

        Returns:
            Dict with data, total, page, limit and totalPages
        """
        params = {"page": page, "limit": limit, "search": search}
        return self._request("GET", "/users", params=params)

    def get_user(self, user_id: str) -> dict[str, Any]:
        return self._request("GET", f"/users/{user_id}")

    def create_user(self, user_data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/users", json=user_data)

    def update_user(self, user_id: str, user_data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/users/{user_id}", json=user_data)

    def delete_user(self, user_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/users/{user_id}")

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_users_csv(self, destination: str | Path, search: str = "") -> Path:
        """
        Download matching users as CSV into `destination`.

        The file is streamed to disk; a partially written file is removed if
        the download fails.

        Returns:
            Path of the written file

        Raises:
            ApiClientError: 404 / NO_USERS_TO_EXPORT when nothing matches
        """
        path = Path(destination)

        try:
            with self._http.stream("GET", "/users/export", params={"search": search}) as response:
                if response.is_error:
                    response.read()
                    raise ApiClientError.from_response(response)

                with open(path, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)

        except httpx.HTTPError as e:
            path.unlink(missing_ok=True)
            raise ApiClientError(
                message=f"CSV download failed: {e}",
                code="CONNECTION_ERROR",
            ) from e

        logger.info(f"Saved users export to {path}")
        return path
