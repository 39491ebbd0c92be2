"""Dining table inventory API."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import deps
from bistro.models.table import DiningTable
from bistro.models.user import User
from bistro.schemas.table import TableCreate, TableRead, TableUpdate
from bistro.services import table_service

router = APIRouter()


async def _load_table(session: AsyncSession, table_id: int) -> DiningTable:
    table = await table_service.get_table(session, table_id)
    if table is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return table


@router.get("", response_model=list[TableRead], summary="List tables")
async def list_tables(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[TableRead]:
    tables = await table_service.list_tables(session)
    return [TableRead.model_validate(table) for table in tables]


@router.get("/{table_id}", response_model=TableRead, summary="Get table")
async def get_table(
    table_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> TableRead:
    return TableRead.model_validate(await _load_table(session, table_id))


@router.post(
    "",
    response_model=TableRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create table",
)
async def create_table(
    payload: TableCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_admin)],
) -> TableRead:
    try:
        table = await table_service.create_table(session, **payload.model_dump())
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to create table"
        ) from exc
    return TableRead.model_validate(table)


@router.patch("/{table_id}", response_model=TableRead, summary="Update table")
async def update_table(
    table_id: int,
    payload: TableUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_admin)],
) -> TableRead:
    table = await _load_table(session, table_id)
    updated = await table_service.update_table(
        session, table=table, **payload.model_dump(exclude_unset=True)
    )
    return TableRead.model_validate(updated)


@router.delete(
    "/{table_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete table"
)
async def delete_table(
    table_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_admin)],
) -> Response:
    table = await _load_table(session, table_id)
    await table_service.delete_table(session, table=table)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
