"""Dining table inventory management."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.models.table import DiningTable


async def list_tables(
    session: AsyncSession, *, include_inactive: bool = True
) -> list[DiningTable]:
    """Return tables ordered by id."""
    stmt = select(DiningTable).order_by(DiningTable.id)
    if not include_inactive:
        stmt = stmt.where(DiningTable.is_active.is_(True))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_table(session: AsyncSession, table_id: int) -> DiningTable | None:
    return await session.get(DiningTable, table_id)


async def create_table(
    session: AsyncSession,
    *,
    name: str,
    capacity: int,
    location: str,
    is_active: bool = True,
) -> DiningTable:
    """Add a table to the floor plan."""
    table = DiningTable(
        name=name, capacity=capacity, location=location, is_active=is_active
    )
    session.add(table)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(table)
    return table


async def update_table(
    session: AsyncSession,
    *,
    table: DiningTable,
    name: str | None = None,
    capacity: int | None = None,
    location: str | None = None,
    is_active: bool | None = None,
) -> DiningTable:
    """Update the provided fields of a table.

    Deactivating or shrinking a table affects availability checks immediately;
    existing reservations are left untouched.
    """
    if name is not None:
        table.name = name
    if capacity is not None:
        table.capacity = capacity
    if location is not None:
        table.location = location
    if is_active is not None:
        table.is_active = is_active
    await session.commit()
    await session.refresh(table)
    return table


async def delete_table(session: AsyncSession, *, table: DiningTable) -> None:
    await session.delete(table)
    await session.commit()
