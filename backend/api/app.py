"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modules.debates.exceptions import (
    InvalidStateError,
    MemberCallError,
    RateLimitExceededError,
)
from modules.debates.routes import panel_router, router as debates_router
from shared.config import get_settings
from shared.exceptions import (
    CouncilError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from shared.logging_config import configure_logging

from .routes import health

logger = logging.getLogger(__name__)

# First matching class wins, so subclasses come before their bases
ERROR_STATUS_CODES: tuple[tuple[type[CouncilError], int], ...] = (
    (ValidationError, 422),
    (RateLimitExceededError, 429),
    (InvalidStateError, 409),
    (NotFoundError, 404),
    (MemberCallError, 502),
    (ExternalServiceError, 503),
)


def status_code_for(error: CouncilError) -> int:
    """HTTP status for a council error (500 if unmapped)."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def council_error_handler(request: Request, exc: CouncilError) -> JSONResponse:
    """Render a CouncilError as its to_dict() body."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")

    headers = {}
    if isinstance(exc, RateLimitExceededError) and exc.retry_after_seconds is not None:
        headers["Retry-After"] = str(exc.retry_after_seconds)

    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    logger.info(
        f"Starting {settings.app_name} on {settings.host}:{settings.port} "
        f"(storage: {settings.storage_backend}, sampler: {settings.sampler_provider})"
    )
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Council debate orchestration API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(CouncilError, council_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(panel_router, prefix="/api/panel", tags=["panel"])
    app.include_router(debates_router, prefix="/api/debates", tags=["debates"])

    return app


# Application instance for uvicorn
app = create_app()
