"""FastAPI application for the pastebin service.

Wires the item and auth routers, maps service errors to HTTP responses,
and prepares the catalog and blob directories on startup.

Run with:
    uvicorn pastebin.main:app --reload
    pastebin-admin serve

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

Tests:
    - tests/unit/test_main.py
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from pastebin import __version__
from pastebin.api.v1 import router as v1_router
from pastebin.config import get_settings
from pastebin.database import check_db_connection, close_db, init_db
from pastebin.errors import PastebinError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
    storage: dict[str, bool]


def blob_directories() -> dict[str, str]:
    """Configured blob directories by role."""
    storage = get_settings().storage_config()
    return {"uploads": storage.upload_dir, "thumbnails": storage.thumbnail_dir}


def is_writable_dir(path: str) -> bool:
    """Check that a blob directory exists and accepts new files."""
    return os.path.isdir(path) and os.access(path, os.W_OK | os.X_OK)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create blob directories and catalog tables, close the pool on exit."""
    logger.info(f"Starting pastebin v{__version__}")

    for role, directory in blob_directories().items():
        Path(directory).mkdir(parents=True, exist_ok=True)
        logger.info(f"Blob directory ({role}): {directory}")

    await init_db()

    yield

    logger.info("Shutting down pastebin")
    await close_db()


settings = get_settings()

app = FastAPI(
    title="Pastebin",
    description="Self-hosted file and text paste service",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.include_router(v1_router)


def error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build the JSON body every error answers with."""
    return JSONResponse(status_code=status_code, content={"error": error, "detail": detail})


@app.exception_handler(PastebinError)
async def pastebin_exception_handler(request, exc: PastebinError):
    """Answer service errors with the status their kind carries."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {type(exc).__name__}: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Give routing and auth errors the same body as service errors."""
    return error_response(exc.status_code, exc.detail)


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        str(exc) if settings.DEBUG else None,
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Report catalog reachability and blob directory writability."""
    db_healthy = await check_db_connection()
    storage = {role: is_writable_dir(path) for role, path in blob_directories().items()}

    return HealthResponse(
        status="healthy" if db_healthy and all(storage.values()) else "degraded",
        version=__version__,
        database=db_healthy,
        storage=storage,
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic info."""
    return {
        "name": "Pastebin",
        "version": __version__,
        "health": "/health",
        "login": "/api/v1/auth/login",
        "items": "/api/v1/items",
    }


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pastebin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
