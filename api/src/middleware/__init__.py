"""FastAPI middleware components.

This package contains request processing layers: bearer token access
control and request logging/metrics.
"""

from api.src.middleware.auth import (
    create_auth_error,
    create_forbidden_error,
    verify_jwt,
)
from api.src.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "create_auth_error",
    "create_forbidden_error",
    "verify_jwt",
    "RequestLoggingMiddleware",
]
