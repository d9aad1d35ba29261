# =============================================================================
# client/ - Python Client for the User Directory API
# =============================================================================

from client.api import ApiClientError, UsersApiClient

__all__ = [
    "ApiClientError",
    "UsersApiClient",
]
