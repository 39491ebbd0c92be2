"""Dictionary-backed repository for tests and embedded use."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from dataclasses import replace
from itertools import count
from typing import Any

from bistro.repositories.base import ReservationRecord, TableRecord, reservation_values


class InMemoryBookingRepository:
    """Keeps tables and reservations in process memory.

    Writes are visible to the next read immediately. Returned records are
    copies, so callers cannot mutate stored state behind the repository's back.
    """

    def __init__(self) -> None:
        self._tables: dict[int, TableRecord] = {}
        self._reservations: dict[int, ReservationRecord] = {}
        self._table_ids = count(1)
        self._reservation_ids = count(1)

    def add_table(
        self,
        capacity: int,
        *,
        name: str | None = None,
        location: str = "Main",
        is_active: bool = True,
    ) -> TableRecord:
        if capacity < 1:
            raise ValueError("Table capacity must be positive")
        table_id = next(self._table_ids)
        table = TableRecord(
            id=table_id,
            name=name or f"Table {table_id}",
            capacity=capacity,
            location=location,
            is_active=is_active,
        )
        self._tables[table_id] = table
        return replace(table)

    def set_table_active(self, table_id: int, is_active: bool) -> None:
        self._tables[table_id].is_active = is_active

    def remove_table(self, table_id: int) -> None:
        self._tables.pop(table_id, None)

    async def list_tables(self, *, active_only: bool = False) -> Sequence[TableRecord]:
        return [
            replace(table)
            for table in self._tables.values()
            if table.is_active or not active_only
        ]

    async def list_reservations_on(
        self, day: dt.date, *, exclude_id: int | None = None
    ) -> Sequence[ReservationRecord]:
        matches = [
            replace(reservation)
            for reservation in self._reservations.values()
            if reservation.date == day and reservation.id != exclude_id
        ]
        return sorted(matches, key=lambda item: (item.time, item.id))

    async def list_reservations(
        self, *, day: dt.date | None = None, user_id: int | None = None
    ) -> Sequence[ReservationRecord]:
        matches = [
            replace(reservation)
            for reservation in self._reservations.values()
            if (day is None or reservation.date == day)
            and (user_id is None or reservation.user_id == user_id)
        ]
        return sorted(matches, key=lambda item: (item.date, item.time, item.id))

    async def get_reservation(self, reservation_id: int) -> ReservationRecord | None:
        reservation = self._reservations.get(reservation_id)
        return replace(reservation) if reservation is not None else None

    async def add_reservation(
        self, fields: Mapping[str, Any], *, user_id: int | None = None
    ) -> ReservationRecord:
        reservation = ReservationRecord(
            id=next(self._reservation_ids),
            user_id=user_id,
            **reservation_values(fields),
        )
        self._reservations[reservation.id] = reservation
        return replace(reservation)

    async def update_reservation(
        self, reservation_id: int, changes: Mapping[str, Any]
    ) -> ReservationRecord | None:
        current = self._reservations.get(reservation_id)
        if current is None:
            return None
        updated = replace(current, **reservation_values(changes))
        self._reservations[reservation_id] = updated
        return replace(updated)

    async def delete_reservation(self, reservation_id: int) -> bool:
        return self._reservations.pop(reservation_id, None) is not None
