"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teachreg import __version__
from teachreg.api.dependencies import close_registration_store, init_registration_store
from teachreg.api.models import ErrorResponse
from teachreg.api.routes import notifications, registrations, students
from teachreg.config import database_url_from_env
from teachreg.logging import get_logger
from teachreg.registry import NotFoundError, RegistryError, StorageError, ValidationError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger("api")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def _describe_request_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Map Registration Store errors to HTTP responses."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, _describe_request_error(exc))

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(RegistryError)
    async def registry_error_handler(_request: Request, exc: RegistryError) -> JSONResponse:
        logger.error("Unhandled registry error: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unexpected error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    database_url = getattr(app.state, "database_url", None) or database_url_from_env()
    init_registration_store(database_url)
    logger.info("Registration store ready")

    yield
    # Shutdown
    close_registration_store()


def create_app(database_url: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database_url: Database to serve. Defaults to TEACHREG_DATABASE_URL,
            read when the app starts.
    """
    app = FastAPI(
        title="teachreg API",
        description="Teacher/student registrations and notification recipients",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.database_url = database_url

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # Include routers
    app.include_router(registrations.router, prefix="/api")
    app.include_router(students.router, prefix="/api")
    app.include_router(notifications.router, prefix="/api")

    return app


# Default app instance
app = create_app()
