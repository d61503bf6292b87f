"""Prometheus metrics definitions and helpers.

Provides the HTTP and MongoDB metric families exposed on ``/metrics``.
"""

from typing import Callable, Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CollectorRegistry,
)


class HTTPMetrics:
    """Request level metrics."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=registry,
        )

        self.requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
            registry=registry,
        )


class DatabaseMetrics:
    """MongoDB operation metrics."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize database metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.operations = Counter(
            "mongodb_operations_total",
            "Total number of MongoDB operations issued",
            ["collection", "operation"],
            registry=registry,
        )

    def record(self, collection: str, operation: str) -> None:
        """Count one operation against a collection."""
        self.operations.labels(collection=collection, operation=operation).inc()


def setup_metrics(
    registry: Optional[CollectorRegistry] = None,
) -> tuple[CollectorRegistry, HTTPMetrics, DatabaseMetrics]:
    """Setup and return metric instances bound to one registry.

    Each application instance gets its own registry so that several apps
    (e.g. in tests) can coexist in one process.

    Returns:
        Tuple of (registry, HTTPMetrics, DatabaseMetrics)
    """
    registry = registry or CollectorRegistry()
    return registry, HTTPMetrics(registry), DatabaseMetrics(registry)


def get_metrics_handler(registry: CollectorRegistry) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
