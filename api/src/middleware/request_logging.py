"""
Request logging and metrics middleware.
"""

import time
import uuid
import structlog
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging import bind_context, unbind_context
from shared.metrics import HTTPMetrics

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Endpoint label for requests that matched no route (404s).
UNMATCHED_ENDPOINT = "unmatched"


def route_template(request: Request) -> str:
    """Matched route path (``/orders/{order_id}``), never the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, correlation IDs and metrics."""

    def __init__(self, app, metrics: Optional[HTTPMetrics] = None):
        super().__init__(app)
        self.metrics = metrics

    def _observe(self, request: Request, status_code: int, duration: float) -> None:
        if self.metrics is None:
            return

        endpoint = route_template(request)
        self.metrics.requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status=status_code
        ).inc()
        self.metrics.request_duration.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(duration)

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        bind_context(correlation_id=correlation_id)
        start_time = time.time()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=client_ip
        )

        if self.metrics is not None:
            self.metrics.requests_in_progress.labels(method=method).inc()

        try:
            response = await call_next(request)
            duration = time.time() - start_time
            self._observe(request, response.status_code, duration)

            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        except Exception as e:
            duration = time.time() - start_time
            self._observe(request, 500, duration)

            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            if self.metrics is not None:
                self.metrics.requests_in_progress.labels(method=method).dec()
            unbind_context("correlation_id")
