"""
Bookings router.

Bookings are created, read, cancelled and listed; they are never updated.
A booking is rejected with 422 when its member or class does not exist or
its date falls outside the class's schedule.
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Body, Depends, Response, status

from api.src.dependencies import get_booking_service, get_page_info
from api.src.models.bookings import Booking, BookClass
from api.src.models.common import ErrorResponse, PageInfo
from api.src.services.bookings_service import BookingService

router = APIRouter(
    prefix="/bookings",
    tags=["Bookings"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
    summary="Book Class",
    responses={
        422: {
            "model": ErrorResponse,
            "description": "Unknown member, unknown class, or date outside the class schedule"
        }
    }
)
async def book_class(
    booking_request: BookClass = Body(...),
    service: BookingService = Depends(get_booking_service)
) -> Booking:
    """
    Book a member into a class on a given date.

    The stored ``classDate`` keeps only the calendar day (UTC).
    """
    return await service.book_class(booking_request)


@router.get(
    "/{booking_id}",
    response_model=Booking,
    summary="Get Booking",
    responses={404: {"model": ErrorResponse, "description": "Booking not found"}}
)
async def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service)
) -> Booking:
    return await service.get_by_id(booking_id)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Booking"
)
async def delete_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service)
) -> Response:
    await service.delete_booking(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[Booking],
    summary="List Bookings"
)
async def list_bookings(
    page_info: PageInfo = Depends(get_page_info),
    service: BookingService = Depends(get_booking_service)
) -> List[Booking]:
    return await service.list_bookings(page_info)
