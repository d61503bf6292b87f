"""
FastAPI application entry point for the Delta Car API.

This module provides the FastAPI application with:
- Token, service catalog and order routers
- Liveness, health and Prometheus metrics endpoints
- Request logging with correlation IDs
- CORS for the storefront
- MongoDB connection lifecycle (connect on startup, close on shutdown)

Uvicorn turns SIGINT/SIGTERM into a lifespan shutdown, which closes the
shared MongoDB client. In-flight requests are not drained first.
"""

import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_client import CONTENT_TYPE_LATEST
from pymongo.errors import PyMongoError

from api.src.config import Settings, get_settings
from api.src.database import MongoConnection
from api.src.dependencies import AppState
from api.src.middleware.request_logging import RequestLoggingMiddleware
from api.src.repositories.order_repo import OrderRepository
from api.src.repositories.service_repo import ServiceRepository
from api.src.routers import orders, services, tokens
from shared.logging import configure_logging
from shared.metrics import get_metrics_handler, setup_metrics

logger = structlog.get_logger(__name__)

LIVENESS_MESSAGE = "Delta car server running"


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - Warning when the placeholder token secret is used outside development
    - MongoDB client creation and ping (failures are logged, not fatal)
    - Text index creation on the services collection
    - Repository initialization
    - Closing the client on shutdown
    """
    state: AppState = app.state.resources
    mongo: MongoConnection = app.state.mongo
    settings = state.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    if settings.uses_default_secret and not settings.is_development:
        logger.warning("default_access_token_secret_in_use", environment=settings.environment)

    connected = await mongo.connect()

    if mongo.is_initialized:
        state.service_repo = ServiceRepository(mongo.services, app.state.db_metrics)
        state.order_repo = OrderRepository(mongo.orders, app.state.db_metrics)

        if connected and settings.create_text_index:
            try:
                await state.service_repo.ensure_text_index()
            except PyMongoError as e:
                logger.error("services_text_index_failed", error=str(e))

    logger.info("application_started", port=settings.port, database_connected=connected)

    try:
        yield
    finally:
        logger.info("application_shutting_down")
        await mongo.close()
        logger.info("application_shutdown_complete")


# ============================================================================
# Exception Handlers
# ============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with the storefront's ``{"message"}`` body."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"}
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None, mongo: Optional[MongoConnection] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        mongo: Connection holder to use (defaults to one built from settings)

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Backend for the Delta Car storefront: services catalog, orders and access tokens.",
        lifespan=lifespan,
        debug=settings.debug,
    )

    registry, http_metrics, db_metrics = setup_metrics()
    app.state.resources = AppState(settings)
    app.state.mongo = mongo or MongoConnection(settings)
    app.state.db_metrics = db_metrics

    # ------------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------------

    app.add_middleware(
        RequestLoggingMiddleware,
        metrics=http_metrics if settings.metrics_enabled else None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # ------------------------------------------------------------------------
    # Health and Metrics
    # ------------------------------------------------------------------------

    @app.get("/", tags=["Health"], response_class=PlainTextResponse)
    async def root() -> str:
        """Liveness string for the storefront and load balancers."""
        return LIVENESS_MESSAGE

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic health status without checking the database.
        """
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler(registry)

        @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    # ------------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------------

    app.include_router(tokens.router)
    app.include_router(services.router)
    app.include_router(orders.router)

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
