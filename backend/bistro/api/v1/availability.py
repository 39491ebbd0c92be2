"""Bookable time slot lookup."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bistro.api import deps
from bistro.repositories.sql import SqlBookingRepository
from bistro.services.availability_service import (
    AvailabilityEngine,
    BookingRules,
    check_booking_window,
)

router = APIRouter()


@router.get(
    "/available-times",
    response_model=list[str],
    summary="List bookable times for a date and party size",
)
async def available_times(
    repository: Annotated[SqlBookingRepository, Depends(deps.get_booking_repository)],
    rules: Annotated[BookingRules, Depends(deps.get_booking_rules)],
    day: Annotated[date, Query(alias="date")],
    guests: Annotated[int, Query()] = 2,
) -> list[str]:
    if not 1 <= guests <= rules.max_party_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Guests must be between 1 and {rules.max_party_size}",
        )
    try:
        check_booking_window(day, rules)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    engine = AvailabilityEngine(repository, rules)
    slots = await engine.available_times(day, guests)
    return [slot.strftime("%H:%M") for slot in slots]
