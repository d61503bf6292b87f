"""
FastAPI dependency injection for repositories and services.

Shared resources are built once in the application lifespan and stored on
``app.state``; these dependencies hand them to route handlers.
"""

import structlog
from typing import Optional
from fastapi import Request

from api.src.config import Settings
from api.src.repositories.order_repo import OrderRepository
from api.src.repositories.service_repo import ServiceRepository
from api.src.services.token_service import TokenService

logger = structlog.get_logger(__name__)


class AppState:
    """Container for resources shared across requests."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.token_service = TokenService(settings)
        self.service_repo: Optional[ServiceRepository] = None
        self.order_repo: Optional[OrderRepository] = None


def _app_state(request: Request) -> AppState:
    return request.app.state.resources


def get_token_service(request: Request) -> TokenService:
    """Get the token service bound to this application."""
    return _app_state(request).token_service


def get_service_repository(request: Request) -> ServiceRepository:
    """
    Get the service repository.

    Raises:
        RuntimeError: If the database was never initialized
    """
    repo = _app_state(request).service_repo
    if repo is None:
        logger.error("service_repository_unavailable")
        raise RuntimeError("Database not initialized")
    return repo


def get_order_repository(request: Request) -> OrderRepository:
    """
    Get the order repository.

    Raises:
        RuntimeError: If the database was never initialized
    """
    repo = _app_state(request).order_repo
    if repo is None:
        logger.error("order_repository_unavailable")
        raise RuntimeError("Database not initialized")
    return repo


async def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Checks X-Forwarded-For header first (for proxies),
    then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
