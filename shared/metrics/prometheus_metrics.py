"""Prometheus metrics definitions and helpers.

Provides the HTTP, connection pool and booking outcome metrics exposed by
the API on ``/metrics``.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class ApiMetrics:
    """Booking API metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize API metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.registry = registry

        self.http_requests = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.http_requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method", "endpoint"],
            registry=registry,
        )

        self.database_connections_active = Gauge(
            "database_connections_active",
            "Open database connections in the pool",
            registry=registry,
        )

        self.database_connections_idle = Gauge(
            "database_connections_idle",
            "Idle database connections in the pool",
            registry=registry,
        )

        self.bookings_created = Counter(
            "bookings_created_total",
            "Total number of bookings stored",
            registry=registry,
        )

        self.booking_rejections = Counter(
            "booking_rejections_total",
            "Booking requests rejected by validation",
            ["reason"],
            registry=registry,
        )

    def observe_pool(self, pool) -> None:
        """Refresh the pool gauges from an asyncpg pool."""
        self.database_connections_active.set(pool.get_size())
        self.database_connections_idle.set(pool.get_idle_size())


def get_metrics_handler(registry: CollectorRegistry = REGISTRY) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
