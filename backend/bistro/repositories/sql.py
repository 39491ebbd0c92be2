"""SQLAlchemy-backed repository."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.models.reservation import Reservation
from bistro.models.table import DiningTable
from bistro.repositories.base import reservation_values


class SqlBookingRepository:
    """Reads and writes reservations through an ``AsyncSession``.

    Every write commits before returning so that the next availability check,
    from this or any other session, observes it.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_tables(self, *, active_only: bool = False) -> Sequence[DiningTable]:
        stmt = select(DiningTable).order_by(DiningTable.id)
        if active_only:
            stmt = stmt.where(DiningTable.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_reservations_on(
        self, day: dt.date, *, exclude_id: int | None = None
    ) -> Sequence[Reservation]:
        stmt = (
            select(Reservation)
            .where(Reservation.date == day)
            .order_by(Reservation.time, Reservation.id)
        )
        if exclude_id is not None:
            stmt = stmt.where(Reservation.id != exclude_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_reservations(
        self, *, day: dt.date | None = None, user_id: int | None = None
    ) -> Sequence[Reservation]:
        stmt = select(Reservation).order_by(
            Reservation.date, Reservation.time, Reservation.id
        )
        if day is not None:
            stmt = stmt.where(Reservation.date == day)
        if user_id is not None:
            stmt = stmt.where(Reservation.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_reservation(self, reservation_id: int) -> Reservation | None:
        return await self.session.get(Reservation, reservation_id)

    async def add_reservation(
        self, fields: Mapping[str, Any], *, user_id: int | None = None
    ) -> Reservation:
        reservation = Reservation(user_id=user_id, **reservation_values(fields))
        self.session.add(reservation)
        await self._commit()
        await self.session.refresh(reservation)
        return reservation

    async def update_reservation(
        self, reservation_id: int, changes: Mapping[str, Any]
    ) -> Reservation | None:
        reservation = await self.session.get(Reservation, reservation_id)
        if reservation is None:
            return None
        for field, value in reservation_values(changes).items():
            setattr(reservation, field, value)
        await self._commit()
        await self.session.refresh(reservation)
        return reservation

    async def delete_reservation(self, reservation_id: int) -> bool:
        reservation = await self.session.get(Reservation, reservation_id)
        if reservation is None:
            return False
        await self.session.delete(reservation)
        await self._commit()
        return True

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
