"""Offset pagination for the course catalog."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OffsetParams(BaseModel):
    """Query parameters for offset pagination."""

    limit: int = Field(default=20, ge=1, le=100, description="Items per page.")
    offset: int = Field(default=0, ge=0, description="Number of items to skip.")


class OffsetPage[T](BaseModel):
    """Offset-paginated response envelope."""

    model_config = ConfigDict(from_attributes=True)

    items: list[T]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
