"""Data models for the FastAPI service.

This package contains Pydantic models for request/response validation
and the domain entities passed between services and repositories.
"""

from api.src.models.bookings import Booking, BookClass
from api.src.models.classes import Class, NewClass, UpdateClass
from api.src.models.common import ErrorResponse, HealthResponse, PageInfo
from api.src.models.members import Member, NewMember, UpdateMember

__all__ = [
    "Booking",
    "BookClass",
    "Class",
    "NewClass",
    "UpdateClass",
    "Member",
    "NewMember",
    "UpdateMember",
    "ErrorResponse",
    "HealthResponse",
    "PageInfo",
]
