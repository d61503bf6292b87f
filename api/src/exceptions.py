"""
Custom exceptions for the Delta Car API.

HTTP-facing rejections (401/403) are raised as FastAPI HTTPExceptions by the
access-control layer; the classes here are domain failures raised below the
routers.
"""

from typing import Optional


class DeltaCarError(Exception):
    """Base exception for the Delta Car API."""


class InvalidTokenError(DeltaCarError):
    """Raised when an access token is missing, malformed, tampered with or expired."""

    def __init__(self, reason: str = "Invalid token", original_error: Optional[Exception] = None):
        self.reason = reason
        self.original_error = original_error
        super().__init__(reason)


class OrderNotFoundError(DeltaCarError):
    """Raised when an order required for an ownership check does not exist."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order '{order_id}' not found")
