# =============================================================================
# app/routers/users.py - User CRUD and Export Endpoints
# =============================================================================
# Maps the /users routes onto UserService and ExportService.
#
# Handlers are plain `def` functions: pymongo is blocking, so FastAPI runs
# them in its threadpool instead of on the event loop.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from app.config import settings
from app.dependencies import ExportServiceDep, UserServiceDep
from app.responses import TemporaryFileResponse
from core.models.user import (
    UserCreate,
    UserDeleteResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from core.services.export_service import EXPORT_FILENAME
from core.services.user_query import resolve_pagination, total_pages

router = APIRouter()

UserIdPath = Annotated[str, Path(description="User id (24-character hex ObjectId)")]


@router.get("", response_model=UserListResponse)
def list_users(
    users: UserServiceDep,
    page: Annotated[str | None, Query(description="Page number (default 1)")] = None,
    limit: Annotated[str | None, Query(description="Users per page (default 10)")] = None,
    search: Annotated[str, Query(description="Case-insensitive substring search")] = "",
):
    """
    List users with pagination and search.

    Searches first name, last name, email, phone, city and country.
    Invalid page/limit values fall back to the defaults.
    """
    page_number, page_size = resolve_pagination(
        page,
        limit,
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )

    data, total = users.list_users(search=search, page=page_number, page_size=page_size)

    return UserListResponse(
        data=data,
        total=total,
        page=page_number,
        limit=page_size,
        total_pages=total_pages(total, page_size),
    )


@router.get("/export")
def export_users(
    exports: ExportServiceDep,
    search: Annotated[str, Query(description="Case-insensitive substring search")] = "",
):
    """
    Export users to CSV.

    Searches first name, last name and email only. Returns every match
    (no pagination) as a `users.csv` download, or 404 when nothing matches.
    """
    path = exports.export_users_csv(search)

    return TemporaryFileResponse(
        path,
        media_type="text/csv",
        filename=EXPORT_FILENAME,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserIdPath, users: UserServiceDep):
    """Get a user by id."""
    return users.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(request: UserCreate, users: UserServiceDep):
    """
    Create a new user.

    Email must be unique (compared lower-cased).
    """
    return users.create_user(request)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: UserIdPath, request: UserUpdate, users: UserServiceDep):
    """
    Update a user.

    Only the fields present in the body change.
    """
    return users.update_user(user_id, request)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
def delete_user(user_id: UserIdPath, users: UserServiceDep):
    """Delete a user permanently."""
    return users.delete_user(user_id)
