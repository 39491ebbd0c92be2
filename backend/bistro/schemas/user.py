"""User schemas."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from bistro.models.user import UserRole, UserStatus


class UserCreate(BaseModel):
    """Payload for creating a user."""

    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=32)
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE


class UserRead(BaseModel):
    """Serialized user."""

    id: int
    email: EmailStr
    name: str
    phone: str | None = None
    role: UserRole
    status: UserStatus

    model_config = ConfigDict(from_attributes=True)
