"""Booking entity and request schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, field_validator

from api.src.models.common import CamelModel, ensure_utc


class Booking(CamelModel):
    """A member's reservation of a class on one calendar day."""

    id: UUID = Field(..., description="Booking ID (UUID)")
    member_id: UUID = Field(..., description="Booked member")
    class_id: UUID = Field(..., description="Booked class")
    class_date: date = Field(..., description="Day being booked")
    booked_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class BookClass(CamelModel):
    """Book class request schema."""

    member_id: UUID = Field(..., description="Member making the booking")
    class_id: UUID = Field(..., description="Class being booked")
    class_date: datetime = Field(..., description="Requested class date")

    @field_validator("class_date")
    @classmethod
    def normalize_class_date(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "memberId": "550e8400-e29b-41d4-a716-446655440000",
                "classId": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
                "classDate": "2025-03-05T09:00:00Z"
            }
        }
    }
