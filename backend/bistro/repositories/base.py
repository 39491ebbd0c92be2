"""Repository capability shared by every storage backend.

The availability engine only needs to read tables and the reservations of one
date; the lifecycle operations additionally insert, update and delete single
reservations. ORM rows and the in-memory records both satisfy the ``*Like``
protocols, so callers never care which backend produced a value.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

RESERVATION_FIELDS = (
    "date",
    "time",
    "guests",
    "name",
    "email",
    "phone",
    "special_requests",
)


class TableLike(Protocol):
    id: int
    name: str
    capacity: int
    location: str
    is_active: bool


class ReservationLike(Protocol):
    id: int
    date: dt.date
    time: dt.time
    guests: int
    name: str
    email: str
    phone: str
    special_requests: str | None
    user_id: int | None


@dataclass(slots=True)
class TableRecord:
    id: int
    name: str
    capacity: int
    location: str
    is_active: bool = True


@dataclass(slots=True)
class ReservationRecord:
    id: int
    date: dt.date
    time: dt.time
    guests: int
    name: str
    email: str
    phone: str
    special_requests: str | None = None
    user_id: int | None = None


class BookingRepository(Protocol):
    """Read/write access to the table inventory and reservations."""

    async def list_tables(self, *, active_only: bool = False) -> Sequence[TableLike]:
        ...

    async def list_reservations_on(
        self, day: dt.date, *, exclude_id: int | None = None
    ) -> Sequence[ReservationLike]:
        ...

    async def list_reservations(
        self, *, day: dt.date | None = None, user_id: int | None = None
    ) -> Sequence[ReservationLike]:
        ...

    async def get_reservation(self, reservation_id: int) -> ReservationLike | None:
        ...

    async def add_reservation(
        self, fields: Mapping[str, Any], *, user_id: int | None = None
    ) -> ReservationLike:
        ...

    async def update_reservation(
        self, reservation_id: int, changes: Mapping[str, Any]
    ) -> ReservationLike | None:
        ...

    async def delete_reservation(self, reservation_id: int) -> bool:
        ...


def reservation_values(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the writable reservation columns, rejecting unknown keys."""
    unknown = set(fields) - set(RESERVATION_FIELDS)
    if unknown:
        raise ValueError(f"Unknown reservation fields: {', '.join(sorted(unknown))}")
    return dict(fields)
