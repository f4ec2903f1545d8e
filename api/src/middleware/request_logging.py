"""
Request logging and metrics middleware.

Every request gets a correlation ID, taken from the ``X-Correlation-ID``
header or generated, bound into the structlog context for the duration of
the request and echoed back on the response.
"""

import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging import bind_context, unbind_context

logger = structlog.get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Probes and scrapes are logged at debug level only.
QUIET_PATHS = ("/v1/liveness", "/v1/readiness", "/metrics")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging, correlation IDs and HTTP metrics."""

    async def dispatch(self, request: Request, call_next):
        """Process request and log details."""
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        bind_context(correlation_id=correlation_id)

        method = request.method
        endpoint = self._endpoint_label(request)
        metrics = getattr(request.app.state, "metrics", None)
        log = logger.debug if request.url.path in QUIET_PATHS else logger.info

        if metrics:
            metrics.http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

        start_time = time.perf_counter()
        log(
            "request_started",
            method=method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)

            duration = time.perf_counter() - start_time
            if metrics:
                metrics.http_requests.labels(
                    method=method,
                    endpoint=endpoint,
                    status=response.status_code
                ).inc()
                metrics.http_request_duration.labels(
                    method=method,
                    endpoint=endpoint
                ).observe(duration)

            log(
                "request_completed",
                method=method,
                path=request.url.path,
                status_code=response.status_code,
                duration=f"{duration:.3f}s"
            )

            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response

        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                "request_failed",
                method=method,
                path=request.url.path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise

        finally:
            if metrics:
                metrics.http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()
            unbind_context("correlation_id")

    @staticmethod
    def _endpoint_label(request: Request) -> str:
        """Route template (``/v1/members/{member_id}``) rather than the raw path."""
        for route in request.app.router.routes:
            match, _ = route.matches(request.scope)
            if match.name == "FULL":
                return getattr(route, "path", request.url.path)
        return "unmatched"
