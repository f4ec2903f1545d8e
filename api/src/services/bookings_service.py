"""
Booking service: cross-entity validation and persistence of bookings.

A booking is accepted only when its member and class both exist and the
requested date lies within the class's inclusive date range. Seat capacity
is not checked against existing bookings.
"""

import structlog
from typing import Callable, List, Optional, Protocol
from uuid import UUID, uuid4

from api.src.errors import (
    ClassNotFoundError,
    DomainError,
    InvalidClassDateError,
    MemberNotFoundError,
    NotFoundError,
    RecordNotFoundError,
    StoreError,
)
from api.src.models.bookings import Booking, BookClass
from api.src.models.common import DEFAULT_PAGE_LIMIT, PageInfo
from api.src.services.classes_service import ClassService
from api.src.services.members_service import MemberService
from shared.metrics import ApiMetrics

logger = structlog.get_logger(__name__)


class BookingStore(Protocol):
    """Persistence capabilities the booking service relies on."""

    async def book_class(self, booking_id: UUID, book_class: BookClass) -> Booking: ...

    async def get_by_id(self, booking_id: UUID) -> Booking: ...

    async def delete(self, booking_id: UUID) -> None: ...

    async def list(self, limit: int, offset: int) -> List[Booking]: ...

    def after_commit(self, callback: Callable[[], None]) -> None: ...


class BookingService:
    """Service for booking operations."""

    def __init__(
        self,
        repository: BookingStore,
        member_service: MemberService,
        class_service: ClassService,
        max_page_limit: int = DEFAULT_PAGE_LIMIT,
        metrics: Optional[ApiMetrics] = None,
    ):
        """
        Initialize booking service.

        Args:
            repository: Booking store
            member_service: Used to check the booked member exists
            class_service: Used to load the booked class and its date range
            max_page_limit: Page size used when a list request asks for none or too many
            metrics: Optional metrics sink for booking outcomes
        """
        self.repository = repository
        self.member_service = member_service
        self.class_service = class_service
        self.max_page_limit = max_page_limit
        self.metrics = metrics

    async def book_class(self, book_class: BookClass) -> Booking:
        """
        Validate and persist a booking.

        Args:
            book_class: Member, class and requested date

        Returns:
            Stored booking with server-assigned timestamps

        Raises:
            MemberNotFoundError: If the member does not exist
            ClassNotFoundError: If the class does not exist
            InvalidClassDateError: If the date is outside the class range
            StoreError: If the store rejects the insert
        """
        booking_id = uuid4()

        try:
            await self._validate_booking(book_class)
        except DomainError as e:
            logger.info(
                "booking_rejected",
                reason=e.kind.value,
                member_id=str(book_class.member_id),
                class_id=str(book_class.class_id)
            )
            if self.metrics:
                self.metrics.booking_rejections.labels(reason=e.kind.value).inc()
            raise

        try:
            booking = await self.repository.book_class(booking_id, book_class)
        except Exception as e:
            raise StoreError("failed to add booking to repository") from e

        if self.metrics:
            self.repository.after_commit(self.metrics.bookings_created.inc)

        logger.info(
            "booking_created",
            booking_id=str(booking.id),
            member_id=str(booking.member_id),
            class_id=str(booking.class_id)
        )
        return booking

    async def get_by_id(self, booking_id: UUID) -> Booking:
        """
        Get booking by ID.

        Raises:
            NotFoundError: If the booking does not exist
        """
        try:
            return await self.repository.get_by_id(booking_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"booking with ID {booking_id} not found") from e

    async def delete_booking(self, booking_id: UUID) -> None:
        """Delete a booking; a missing ID is not an error."""
        await self.repository.delete(booking_id)

    async def list_bookings(self, page_info: PageInfo) -> List[Booking]:
        """List one page of bookings."""
        page = page_info.clamp(self.max_page_limit)
        return await self.repository.list(page.limit, page.offset)

    async def _validate_booking(self, book_class: BookClass) -> None:
        try:
            await self.member_service.get_by_id(book_class.member_id)
        except NotFoundError as e:
            raise MemberNotFoundError(
                f"member with ID {book_class.member_id} not found"
            ) from e

        # Any other lookup failure propagates here instead of falling through
        # to the date check.
        try:
            gym_class = await self.class_service.get_by_id(book_class.class_id)
        except NotFoundError as e:
            raise ClassNotFoundError(
                f"class with ID {book_class.class_id} not found"
            ) from e

        if not gym_class.accepts(book_class.class_date):
            raise InvalidClassDateError(
                f"class date {book_class.class_date.isoformat()} is outside "
                f"{gym_class.start_date.isoformat()} - {gym_class.end_date.isoformat()}"
            )
