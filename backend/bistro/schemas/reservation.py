"""Pydantic schemas for reservations."""
from __future__ import annotations

import datetime as dt

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_serializer,
    field_validator,
)

from bistro.core.config import get_settings


def _minute_precision(value: dt.time) -> dt.time:
    if value.second or value.microsecond:
        raise ValueError("Time must be given to the minute (HH:MM)")
    if value.tzinfo is not None:
        raise ValueError("Time must not carry a timezone")
    return value


def _party_size(value: int) -> int:
    limit = get_settings().max_party_size
    if not 1 <= value <= limit:
        raise ValueError(f"Guests must be between 1 and {limit}")
    return value


class ReservationBase(BaseModel):
    """Booking details supplied by the guest."""

    date: dt.date
    time: dt.time
    guests: int
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=32)
    special_requests: str | None = Field(default=None, max_length=1024)

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: dt.time) -> dt.time:
        return _minute_precision(value)

    @field_validator("guests")
    @classmethod
    def _check_guests(cls, value: int) -> int:
        return _party_size(value)


class ReservationCreate(ReservationBase):
    """Payload for booking a table."""


class ReservationUpdate(BaseModel):
    """Fields a guest or admin may change; omitted fields stay as they are."""

    date: dt.date | None = None
    time: dt.time | None = None
    guests: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=10, max_length=32)
    special_requests: str | None = Field(default=None, max_length=1024)

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: dt.time | None) -> dt.time | None:
        return _minute_precision(value) if value is not None else value

    @field_validator("guests")
    @classmethod
    def _check_guests(cls, value: int | None) -> int | None:
        return _party_size(value) if value is not None else value

    def changes(self) -> dict[str, object]:
        """Explicitly provided fields, ignoring nulls for required columns."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key == "special_requests"
        }


class ReservationRead(BaseModel):
    """Serialized reservation."""

    id: int
    date: dt.date
    time: dt.time
    guests: int
    name: str
    email: str
    phone: str
    special_requests: str | None = None
    user_id: int | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("time")
    def _serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")
