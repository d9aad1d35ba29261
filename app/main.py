# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the User Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    UserDirectoryException,
    user_directory_exception_handler,
    validation_exception_handler,
)
from app.routers import health, users
from lib.mongo_client import USERS_COLLECTION, create_mongo_client, ensure_user_indexes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: connect to MongoDB and make sure the users indexes exist.
      A failure here stops the server from starting.
    - Shutdown: close the MongoDB client.
    """
    logger.info(f"Starting User Directory API in {settings.ENVIRONMENT} mode")

    client = create_mongo_client(settings)
    database = client[settings.MONGODB_DATABASE]

    try:
        ensure_user_indexes(database[USERS_COLLECTION])
    except Exception:
        client.close()
        raise

    app.state.mongo_client = client
    app.state.database = database

    yield

    logger.info("Shutting down User Directory API")
    client.close()


app = FastAPI(
    title="User Directory API",
    description="""
## User Directory API

List, search, create, edit, delete and export user records.

### Quick Start

```bash
# List the second page of users living in Paris
curl "http://localhost:5000/api/users?page=2&limit=10&search=paris"

# Create a user
curl -X POST http://localhost:5000/api/users \\
  -H "Content-Type: application/json" \\
  -d '{"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"}'

# Download matching users as CSV
curl -OJ "http://localhost:5000/api/users/export?search=lovelace"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Users",
            "description": "Create, read, update, delete and export users",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(UserDirectoryException, user_directory_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "User Directory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT)
