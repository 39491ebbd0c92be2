"""Schemas for dining table management."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TableBase(BaseModel):
    """Shared table fields."""

    name: str = Field(min_length=1, max_length=120)
    capacity: int = Field(ge=1)
    location: str = Field(min_length=1, max_length=120)
    is_active: bool = True


class TableCreate(TableBase):
    """Payload to add a table to the floor plan."""


class TableUpdate(BaseModel):
    """Mutable table fields."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    capacity: int | None = Field(default=None, ge=1)
    location: str | None = Field(default=None, min_length=1, max_length=120)
    is_active: bool | None = None


class TableRead(TableBase):
    """Serialized table."""

    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
