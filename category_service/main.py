"""FastAPI application entry point.

Category service: categories (a self-referencing tree) and tags, both with
slug identity, behind a JSON API.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from category_service import __version__
from category_service.api.routes import categories_router, health_router, tags_router
from category_service.config import Settings, settings as default_settings
from category_service.core.exceptions import ServiceError
from category_service.infra.database import Database
from category_service.infra.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from category_service.schemas.common import ErrorResponse
from category_service.services.bootstrap import seed_default_categories
from category_service.services.user_client import UserServiceClient

logger = get_logger(__name__)


def create_app(
    config: Settings | None = None,
    database: Database | None = None,
    user_client: UserServiceClient | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        config: Settings (defaults to the process settings)
        database: Pre-built database handle; built from settings when omitted
        user_client: Pre-built user service client; built from settings when omitted
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler.

        Startup:
        - Open the database handle and create missing tables
        - Seed default categories on an empty database

        Shutdown:
        - Close the user service client
        - Dispose database connections
        """
        logger.info("Category service starting", environment=config.environment)

        db = database or Database.from_settings(config)
        app.state.db = db
        app.state.user_client = user_client or UserServiceClient(
            base_url=config.user_service_url,
            timeout=config.user_service_timeout,
        )

        try:
            await db.create_schema()
        except Exception as e:
            logger.error("Schema initialization failed", error=str(e))
            raise

        if config.seed_default_categories:
            await seed_default_categories(db)

        yield

        logger.info("Category service shutting down")
        await app.state.user_client.close()
        await db.close()
        logger.info("Cleanup complete")

    app = FastAPI(
        title="Category Service",
        description="Category tree and tag taxonomy API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if config.environment == "dev" else None,
        redoc_url=None,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its outcome and duration."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start_time = time.time()

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=int((time.time() - start_time) * 1000),
            )
            return response
        finally:
            clear_request_context()

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        """Map service error kinds to their HTTP status."""
        if exc.status_code >= 500:
            logger.error("Service error", error=exc.message, error_type=type(exc).__name__)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Reject malformed input with 400 before any database work."""
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Invalid request", details=details).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(health_router, tags=["Health"])
    app.include_router(categories_router, prefix=f"{config.api_prefix}/categories", tags=["Categories"])
    app.include_router(tags_router, prefix=f"{config.api_prefix}/tags", tags=["Tags"])

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - basic service info."""
        return {
            "service": "category-service",
            "version": __version__,
            "environment": config.environment,
        }

    return app


setup_logging()
app = create_app()
