"""
FastAPI application entry point for the class booking API.

This module provides the application factory with:
- Member, class and booking endpoints
- Liveness and readiness endpoints
- Request logging with correlation IDs
- Prometheus metrics
- Database connection pool management and startup migrations
- Graceful startup and shutdown

Run with ``uvicorn api.src.main:create_app --factory``.
"""

import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.src.config import Settings, get_settings
from api.src.database import PostgresProbe, close_db_pool, init_db_pool
from api.src.errors import DomainError, ErrorKind, StoreError
from api.src.middleware import RequestLoggingMiddleware
from api.src.migrations import apply_migrations
from api.src.routers import bookings, classes, health, members
from shared.logging import configure_logging
from shared.metrics import ApiMetrics, get_metrics_handler

logger = structlog.get_logger(__name__)

ERROR_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_DATA: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.MEMBER_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.CLASS_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.INVALID_CLASS_DATE: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - Logging configuration
    - Database connection pool initialization and migrations
    - Graceful shutdown and resource cleanup
    """
    settings: Settings = app.state.settings

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
        environment=settings.environment,
    )

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    # ========================================================================
    # Startup: Initialize Resources
    # ========================================================================

    pool = await init_db_pool(settings)
    try:
        if settings.run_migrations:
            await apply_migrations(pool)

        app.state.db_pool = pool
        app.state.probe = PostgresProbe(pool)

        if app.state.metrics:
            app.state.metrics.observe_pool(pool)

        logger.info(
            "application_started",
            app_name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment
        )

        yield

    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    # ========================================================================
    # Shutdown: Cleanup Resources
    # ========================================================================

    finally:
        logger.info("application_shutting_down")
        await close_db_pool(pool)
        logger.info("application_shutdown_complete")


# ============================================================================
# Exception Handlers
# ============================================================================

async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to 404/422 by kind."""
    status_code = ERROR_STATUS.get(exc.kind, status.HTTP_422_UNPROCESSABLE_CONTENT)
    logger.info(
        "domain_error",
        path=request.url.path,
        error_code=exc.kind.value,
        detail=exc.message,
        status_code=status_code
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "errorCode": exc.kind.value}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors (bad body, path or query) as 400."""
    errors = exc.errors()
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=[{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors]
    )

    detail = "invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "errorCode": "invalid_request"}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Persistence failures: log the cause, hide it from the client."""
    logger.error(
        "store_error",
        path=request.url.path,
        error=str(exc),
        cause=repr(exc.__cause__),
        correlation_id=getattr(request.state, "correlation_id", None)
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# ============================================================================
# FastAPI Application
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment settings)

    Returns:
        Configured application; the pool is opened by the lifespan
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Register members, schedule gym classes and book members into classes.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.db_pool = None
    app.state.probe = None
    # Per-app registry so several apps (tests) can coexist in one process.
    app.state.metrics = ApiMetrics(CollectorRegistry()) if settings.metrics_enabled else None

    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(members.router)
    app.include_router(classes.router)
    app.include_router(bookings.router)
    app.include_router(health.router)

    if app.state.metrics:
        render_metrics = get_metrics_handler(app.state.metrics.registry)

        @app.get("/metrics", tags=["Monitoring"], include_in_schema=False)
        async def metrics(request: Request) -> Response:
            """Prometheus metrics endpoint."""
            if request.app.state.db_pool:
                request.app.state.metrics.observe_pool(request.app.state.db_pool)

            return Response(content=render_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    settings = get_settings()

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

    uvicorn.run(
        "api.src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
