"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    DatabaseMetrics,
    HTTPMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "DatabaseMetrics",
    "HTTPMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
