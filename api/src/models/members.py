"""Member entity and request schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import Field

from api.src.models.common import CamelModel


class Member(CamelModel):
    """A gym member as stored."""

    id: UUID = Field(..., description="Member ID (UUID)")
    name: str = Field(..., description="Member name")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class NewMember(CamelModel):
    """Create member request schema."""

    name: str = Field(default="", description="Member name (required, non-empty)")

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Alice"}
        }
    }


class UpdateMember(CamelModel):
    """Partial update; only supplied fields are changed."""

    name: Optional[str] = Field(None, description="New member name")

    def changes(self) -> Dict[str, Any]:
        """Supplied fields keyed by column name."""
        return self.model_dump(exclude_none=True)
