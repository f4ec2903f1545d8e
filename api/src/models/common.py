"""Shared Pydantic models: base config, pagination, error and health bodies."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DEFAULT_PAGE_LIMIT = 100


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC so range comparisons never mix kinds."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base model serialising to camelCase JSON while accepting snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PageInfo(BaseModel):
    """
    Pagination request for list operations.

    ``limit`` of zero, below zero or above the maximum is replaced with the
    maximum. ``offset`` is ``limit * page``.
    """

    limit: int = Field(default=0, description="Requested page size")
    page: int = Field(default=0, ge=0, description="Zero-based page index")

    def clamp(self, max_limit: int = DEFAULT_PAGE_LIMIT) -> "PageInfo":
        """Return a copy with the limit forced into ``1..max_limit``."""
        if self.limit <= 0 or self.limit > max_limit:
            return PageInfo(limit=max_limit, page=self.page)
        return self

    @property
    def offset(self) -> int:
        """Number of rows to skip."""
        return self.limit * self.page


class ErrorResponse(CamelModel):
    """Error response schema."""

    detail: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )
    error_code: Optional[str] = Field(
        None,
        description="Error code"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "detail": "class not found",
                "errorCode": "class_not_found"
            }
        },
    )


class HealthResponse(BaseModel):
    """Readiness probe body."""

    status: str = Field(..., description="ok, or the failing dependency")
