"""Reservation management API."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError

from bistro.api import deps
from bistro.core.config import get_settings
from bistro.models.user import User
from bistro.repositories.base import ReservationLike
from bistro.repositories.sql import SqlBookingRepository
from bistro.schemas.reservation import (
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
)
from bistro.services import reservation_service
from bistro.services.availability_service import BookingRules

router = APIRouter()

settings = get_settings()

Repository = Annotated[SqlBookingRepository, Depends(deps.get_booking_repository)]
Rules = Annotated[BookingRules, Depends(deps.get_booking_rules)]


def _assert_can_manage(user: User, reservation: ReservationLike, action: str) -> None:
    if not user.is_admin and user.id != reservation.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Forbidden: You don't have permission to {action} this reservation",
        )


async def _load_reservation(repository: SqlBookingRepository, reservation_id: int) -> ReservationLike:
    reservation = await reservation_service.get_reservation(repository, reservation_id)
    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        )
    return reservation


@router.get("", response_model=list[ReservationRead], summary="List reservations")
async def list_reservations(
    repository: Repository,
    _: Annotated[User, Depends(deps.get_current_admin)],
    day: Annotated[date | None, Query(alias="date")] = None,
) -> list[ReservationRead]:
    reservations = await reservation_service.list_reservations(repository, day=day)
    return [ReservationRead.model_validate(obj) for obj in reservations]


@router.get(
    "/mine", response_model=list[ReservationRead], summary="List my reservations"
)
async def list_my_reservations(
    repository: Repository,
    current_user: Annotated[User, Depends(deps.get_current_user)],
) -> list[ReservationRead]:
    reservations = await reservation_service.list_reservations(
        repository, user_id=current_user.id
    )
    return [ReservationRead.model_validate(obj) for obj in reservations]


@router.post(
    "",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book a table",
    dependencies=[deps.rate_limited(settings.rate_limit_default)],
)
async def create_reservation(
    payload: ReservationCreate,
    repository: Repository,
    rules: Rules,
    current_user: Annotated[User | None, Depends(deps.get_optional_user)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.create_reservation(
            repository,
            rules=rules,
            user_id=current_user.id if current_user is not None else None,
            **payload.model_dump(),
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to create reservation",
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return ReservationRead.model_validate(reservation)


@router.get(
    "/{reservation_id}", response_model=ReservationRead, summary="Get reservation"
)
async def get_reservation(
    reservation_id: int,
    repository: Repository,
    current_user: Annotated[User, Depends(deps.get_current_user)],
) -> ReservationRead:
    reservation = await _load_reservation(repository, reservation_id)
    _assert_can_manage(current_user, reservation, "view")
    return ReservationRead.model_validate(reservation)


@router.patch(
    "/{reservation_id}", response_model=ReservationRead, summary="Update reservation"
)
async def update_reservation(
    reservation_id: int,
    payload: ReservationUpdate,
    repository: Repository,
    rules: Rules,
    current_user: Annotated[User, Depends(deps.get_current_user)],
) -> ReservationRead:
    reservation = await _load_reservation(repository, reservation_id)
    _assert_can_manage(current_user, reservation, "modify")
    try:
        updated = await reservation_service.update_reservation(
            repository,
            rules=rules,
            reservation_id=reservation_id,
            changes=payload.changes(),
        )
    except reservation_service.ReservationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        ) from exc
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to update reservation",
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return ReservationRead.model_validate(updated)


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel reservation",
)
async def delete_reservation(
    reservation_id: int,
    repository: Repository,
    current_user: Annotated[User, Depends(deps.get_current_user)],
) -> Response:
    reservation = await _load_reservation(repository, reservation_id)
    _assert_can_manage(current_user, reservation, "cancel")
    try:
        await reservation_service.delete_reservation(
            repository, reservation_id=reservation_id
        )
    except reservation_service.ReservationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
