"""
Shared fixtures: in-memory stores, services and an API client wired to them.

The in-memory stores mirror the asyncpg repositories: they assign
timestamps, raise ``RecordNotFoundError`` for missing rows, treat deletes
of unknown IDs as no-ops and list in insertion order.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from api.src.config import Settings
from api.src.dependencies import get_booking_service, get_class_service, get_member_service
from api.src.errors import RecordNotFoundError
from api.src.main import create_app
from api.src.models.bookings import Booking, BookClass
from api.src.models.classes import Class, NewClass, UpdateClass
from api.src.models.members import Member, NewMember, UpdateMember
from api.src.services.bookings_service import BookingService
from api.src.services.classes_service import ClassService
from api.src.services.members_service import MemberService


# ============================================================================
# IN-MEMORY STORES (Test Doubles)
# ============================================================================


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryMemberStore:
    """Member store backed by a dict."""

    table = "members"

    def __init__(self):
        self.rows: Dict[UUID, Member] = {}

    async def add(self, member_id: UUID, new_member: NewMember) -> Member:
        now = _now()
        member = Member(id=member_id, name=new_member.name, created_at=now, updated_at=now)
        self.rows[member_id] = member
        return member

    async def get_by_id(self, member_id: UUID) -> Member:
        if member_id not in self.rows:
            raise RecordNotFoundError(self.table, member_id)
        return self.rows[member_id]

    async def update(self, member_id: UUID, update_member: UpdateMember) -> Member:
        current = await self.get_by_id(member_id)
        changes = update_member.changes()
        if not changes:
            return current
        updated = current.model_copy(update={**changes, "updated_at": _now()})
        self.rows[member_id] = updated
        return updated

    async def delete(self, member_id: UUID) -> None:
        self.rows.pop(member_id, None)

    async def list(self, limit: int, offset: int) -> List[Member]:
        return list(self.rows.values())[offset:offset + limit]


class InMemoryClassStore:
    """Class store backed by a dict."""

    table = "classes"

    def __init__(self):
        self.rows: Dict[UUID, Class] = {}

    async def add(self, class_id: UUID, new_class: NewClass) -> Class:
        now = _now()
        gym_class = Class(
            id=class_id,
            name=new_class.name,
            start_date=new_class.start_date,
            end_date=new_class.end_date,
            capacity=new_class.capacity,
            created_at=now,
            updated_at=now,
        )
        self.rows[class_id] = gym_class
        return gym_class

    async def get_by_id(self, class_id: UUID) -> Class:
        if class_id not in self.rows:
            raise RecordNotFoundError(self.table, class_id)
        return self.rows[class_id]

    async def update(self, class_id: UUID, update_class: UpdateClass) -> Class:
        current = await self.get_by_id(class_id)
        changes = update_class.changes()
        if not changes:
            return current
        updated = current.model_copy(update={**changes, "updated_at": _now()})
        self.rows[class_id] = updated
        return updated

    async def delete(self, class_id: UUID) -> None:
        self.rows.pop(class_id, None)

    async def list(self, limit: int, offset: int) -> List[Class]:
        return list(self.rows.values())[offset:offset + limit]


class InMemoryBookingStore:
    """Booking store backed by a dict."""

    table = "bookings"

    def __init__(self):
        self.rows: Dict[UUID, Booking] = {}

    async def book_class(self, booking_id: UUID, book_class: BookClass) -> Booking:
        now = _now()
        booking = Booking(
            id=booking_id,
            member_id=book_class.member_id,
            class_id=book_class.class_id,
            class_date=book_class.class_date.astimezone(timezone.utc).date(),
            booked_at=now,
            updated_at=now,
        )
        self.rows[booking_id] = booking
        return booking

    async def get_by_id(self, booking_id: UUID) -> Booking:
        if booking_id not in self.rows:
            raise RecordNotFoundError(self.table, booking_id)
        return self.rows[booking_id]

    async def delete(self, booking_id: UUID) -> None:
        self.rows.pop(booking_id, None)

    async def list(self, limit: int, offset: int) -> List[Booking]:
        return list(self.rows.values())[offset:offset + limit]

    def after_commit(self, callback: Callable[[], None]) -> None:
        callback()


class StaticProbe:
    """Readiness probe with a fixed outcome."""

    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = 0

    async def check(self) -> None:
        self.calls += 1
        if self.error:
            raise self.error


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings that never touch a real database."""
    return Settings(
        _env_file=None,
        environment="development",
        run_migrations=False,
        log_format="text",
    )


@pytest.fixture
def member_store() -> InMemoryMemberStore:
    return InMemoryMemberStore()


@pytest.fixture
def class_store() -> InMemoryClassStore:
    return InMemoryClassStore()


@pytest.fixture
def booking_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def member_service(member_store) -> MemberService:
    return MemberService(member_store)


@pytest.fixture
def class_service(class_store) -> ClassService:
    return ClassService(class_store)


@pytest.fixture
def probe() -> StaticProbe:
    return StaticProbe()


@pytest.fixture
def app(settings, member_store, class_store, booking_store, probe):
    """
    Application wired to the in-memory stores.

    The lifespan is not run (no ``with TestClient``), so no pool is opened.
    """
    application = create_app(settings)
    application.state.probe = probe
    metrics = application.state.metrics

    application.dependency_overrides[get_member_service] = lambda: MemberService(member_store)
    application.dependency_overrides[get_class_service] = lambda: ClassService(class_store)
    application.dependency_overrides[get_booking_service] = lambda: BookingService(
        booking_store,
        MemberService(member_store),
        ClassService(class_store),
        metrics=metrics,
    )

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """HTTP client that renders unhandled errors as 500 responses."""
    return TestClient(app, raise_server_exceptions=False)
