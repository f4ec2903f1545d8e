"""
Booking repository for database operations.

Bookings are created and deleted but never updated in place. The class
date is stored as a SQL ``date``, so the time of day is dropped here.
"""

import structlog
from datetime import timezone
from typing import List
from uuid import UUID

from api.src.errors import RecordNotFoundError
from api.src.models.bookings import Booking, BookClass
from api.src.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)

BOOKING_COLUMNS = "id, member_id, class_id, class_date, booked_at, updated_at"


def _to_booking(row) -> Booking:
    return Booking(
        id=row["id"],
        member_id=row["member_id"],
        class_id=row["class_id"],
        class_date=row["class_date"],
        booked_at=row["booked_at"],
        updated_at=row["updated_at"]
    )


class BookingRepository(BaseRepository):
    """Repository for booking database operations."""

    table = "bookings"

    async def book_class(self, booking_id: UUID, book_class: BookClass) -> Booking:
        """
        Insert a booking.

        Args:
            booking_id: Identity assigned by the service
            book_class: Already validated booking request

        Returns:
            Stored booking including server timestamps
        """
        class_day = book_class.class_date.astimezone(timezone.utc).date()
        try:
            async with self.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO bookings (id, member_id, class_id, class_date)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {BOOKING_COLUMNS}
                    """,
                    booking_id,
                    book_class.member_id,
                    book_class.class_id,
                    class_day
                )

            logger.info(
                "booking_stored",
                booking_id=str(booking_id),
                member_id=str(book_class.member_id),
                class_id=str(book_class.class_id),
                class_date=class_day.isoformat()
            )
            return _to_booking(row)

        except Exception as e:
            logger.error("booking_create_failed", error=str(e), booking_id=str(booking_id))
            raise

    async def get_by_id(self, booking_id: UUID) -> Booking:
        """
        Get booking by ID.

        Raises:
            RecordNotFoundError: If no booking has this ID
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {BOOKING_COLUMNS}
                    FROM bookings
                    WHERE id = $1
                    """,
                    booking_id
                )
        except Exception as e:
            logger.error("booking_get_by_id_failed", error=str(e), booking_id=str(booking_id))
            raise

        if not row:
            logger.debug("booking_not_found", booking_id=str(booking_id))
            raise RecordNotFoundError(self.table, booking_id)

        return _to_booking(row)

    async def delete(self, booking_id: UUID) -> None:
        """Delete a booking. Deleting a missing ID is not an error."""
        try:
            async with self.transaction() as conn:
                result = await conn.execute(
                    "DELETE FROM bookings WHERE id = $1",
                    booking_id
                )
        except Exception as e:
            logger.error("booking_delete_failed", error=str(e), booking_id=str(booking_id))
            raise

        logger.info(
            "booking_deleted",
            booking_id=str(booking_id),
            deleted=self.affected_rows(result)
        )

    async def list(self, limit: int, offset: int) -> List[Booking]:
        """List bookings in booking order."""
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {BOOKING_COLUMNS}
                    FROM bookings
                    ORDER BY booked_at, id
                    LIMIT $1 OFFSET $2
                    """,
                    limit,
                    offset
                )

            return [_to_booking(row) for row in rows]

        except Exception as e:
            logger.error("booking_list_failed", error=str(e), limit=limit, offset=offset)
            raise
