"""
FastAPI dependency injection for database access, services and pagination.

Provides injectable dependencies for:
- The request unit of work (one connection, one transaction)
- Repository-backed service instances
- Pagination parameters
- Readiness probe and metrics

Shared resources (pool, probe, metrics, settings) are read from
``request.app.state``, populated by ``create_app``. Tests override the
service dependencies with ``app.dependency_overrides``.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Query, Request

from api.src.config import Settings
from api.src.database import ConnectionScope, PostgresProbe, unit_of_work
from api.src.models.common import PageInfo
from api.src.repositories.booking_repo import BookingRepository
from api.src.repositories.class_repo import ClassRepository
from api.src.repositories.member_repo import MemberRepository
from api.src.services.bookings_service import BookingService
from api.src.services.classes_service import ClassService
from api.src.services.members_service import MemberService
from shared.metrics import ApiMetrics


# ============================================================================
# APPLICATION STATE
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_metrics(request: Request) -> Optional[ApiMetrics]:
    """Metrics registry holder, or None when metrics are disabled."""
    return getattr(request.app.state, "metrics", None)


def get_probe(request: Request) -> PostgresProbe:
    """Readiness probe bound to the application pool."""
    return request.app.state.probe


# ============================================================================
# DATABASE UNIT OF WORK
# ============================================================================


async def get_db(request: Request) -> AsyncGenerator[ConnectionScope, None]:
    """
    Borrow a connection and open the request transaction.

    FastAPI caches this dependency per request, so every repository built
    for the request shares one transaction. Service dependencies declare it
    with ``scope="function"``: the commit completes before the response is
    sent. An exception raised by the endpoint propagates here and rolls the
    transaction back.

    Yields:
        ConnectionScope for repositories
    """
    async with unit_of_work(request.app.state.db_pool) as scope:
        yield scope


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


def get_member_service(
    db: ConnectionScope = Depends(get_db, scope="function"),
    settings: Settings = Depends(get_app_settings)
) -> MemberService:
    """Member service over the request transaction."""
    return MemberService(MemberRepository(db), settings.pagination_max_limit)


def get_class_service(
    db: ConnectionScope = Depends(get_db, scope="function"),
    settings: Settings = Depends(get_app_settings)
) -> ClassService:
    """Class service over the request transaction."""
    return ClassService(ClassRepository(db), settings.pagination_max_limit)


def get_booking_service(
    db: ConnectionScope = Depends(get_db, scope="function"),
    settings: Settings = Depends(get_app_settings),
    metrics: Optional[ApiMetrics] = Depends(get_metrics)
) -> BookingService:
    """
    Booking service over the request transaction.

    Member and class lookups made during validation read through the same
    transaction as the booking insert.
    """
    return BookingService(
        BookingRepository(db),
        MemberService(MemberRepository(db), settings.pagination_max_limit),
        ClassService(ClassRepository(db), settings.pagination_max_limit),
        max_page_limit=settings.pagination_max_limit,
        metrics=metrics,
    )


# ============================================================================
# PAGINATION DEPENDENCIES
# ============================================================================


async def get_page_info(
    page: int = Query(default=0, ge=0, description="Zero-based page index"),
    limit: int = Query(default=0, description="Page size; 0 or above the maximum means the maximum")
) -> PageInfo:
    """
    Get pagination parameters from query string.

    Non-numeric values fail request validation (400). Clamping of the limit
    happens in the services.
    """
    return PageInfo(limit=limit, page=page)
