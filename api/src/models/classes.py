"""Class entity and request schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import Field, field_validator

from api.src.models.common import CamelModel, ensure_utc


class Class(CamelModel):
    """A bookable class running over an inclusive date range."""

    id: UUID = Field(..., description="Class ID (UUID)")
    name: str = Field(..., description="Class name")
    start_date: datetime = Field(..., description="First bookable moment")
    end_date: datetime = Field(..., description="Last bookable moment")
    capacity: int = Field(..., description="Seats per session")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def accepts(self, moment: datetime) -> bool:
        """Whether ``moment`` lies within ``[start_date, end_date]``."""
        return self.start_date <= ensure_utc(moment) <= self.end_date


class NewClass(CamelModel):
    """
    Create class request schema.

    Name and capacity default to empty values so that the service, not the
    schema, reports them as invalid data.
    """

    name: str = Field(default="", description="Class name (required, non-empty)")
    start_date: datetime = Field(..., description="Range start (inclusive)")
    end_date: datetime = Field(..., description="Range end (inclusive)")
    capacity: int = Field(default=0, description="Seats per session (positive)")

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Morning Yoga",
                "startDate": "2025-03-01T00:00:00Z",
                "endDate": "2025-03-31T23:59:59Z",
                "capacity": 20
            }
        }
    }


class UpdateClass(CamelModel):
    """Partial update; any subset of fields may be supplied."""

    name: Optional[str] = Field(None, description="New class name")
    start_date: Optional[datetime] = Field(None, description="New range start")
    end_date: Optional[datetime] = Field(None, description="New range end")
    capacity: Optional[int] = Field(None, description="New capacity")

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def changes(self) -> Dict[str, Any]:
        """Supplied fields keyed by column name."""
        return self.model_dump(exclude_none=True)
