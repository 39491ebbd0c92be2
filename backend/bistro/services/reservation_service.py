"""Reservation lifecycle: availability-checked create, update and delete."""
from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import date, time
from typing import Any

from bistro.repositories.base import BookingRepository, ReservationLike, reservation_values
from bistro.security.redact import mask_email, mask_phone
from bistro.services.availability_service import (
    AvailabilityDecision,
    AvailabilityEngine,
    AvailabilityReason,
    BookingRules,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "This time slot is not available for the requested party size"


class CapacityConflictError(ValueError):
    """No eligible table is free for the requested slot."""

    def __init__(self, decision: AvailabilityDecision, message: str = UNAVAILABLE_MESSAGE) -> None:
        super().__init__(message)
        self.decision = decision


class NoEligibleTableError(CapacityConflictError):
    """No active table in the restaurant can seat the party at all."""


class ReservationNotFoundError(LookupError):
    def __init__(self, reservation_id: int) -> None:
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id


_date_locks: weakref.WeakValueDictionary[date, asyncio.Lock] = weakref.WeakValueDictionary()


@asynccontextmanager
async def _booking_guard(rules: BookingRules, *days: date) -> AsyncIterator[None]:
    """Hold per-date locks for the check-then-write when serialization is on.

    Without ``serialize_bookings`` two concurrent requests may both pass the
    check and both insert.
    """
    if not rules.serialize_bookings:
        yield
        return
    async with AsyncExitStack() as stack:
        for day in sorted(set(days)):
            lock = _date_locks.get(day)
            if lock is None:
                lock = asyncio.Lock()
                _date_locks[day] = lock
            await stack.enter_async_context(lock)
        yield


def _raise_if_unavailable(decision: AvailabilityDecision) -> None:
    if decision.reason is AvailabilityReason.NO_ELIGIBLE_TABLE:
        raise NoEligibleTableError(decision)
    if not decision.available:
        raise CapacityConflictError(decision)


async def list_reservations(
    repository: BookingRepository,
    *,
    day: date | None = None,
    user_id: int | None = None,
) -> Sequence[ReservationLike]:
    """Return reservations ordered by date and time, optionally filtered."""
    return await repository.list_reservations(day=day, user_id=user_id)


async def get_reservation(
    repository: BookingRepository, reservation_id: int
) -> ReservationLike | None:
    return await repository.get_reservation(reservation_id)


async def create_reservation(
    repository: BookingRepository,
    *,
    rules: BookingRules,
    date: date,
    time: time,
    guests: int,
    name: str,
    email: str,
    phone: str,
    special_requests: str | None = None,
    user_id: int | None = None,
) -> ReservationLike:
    """Book a party if a table is free, otherwise raise ``CapacityConflictError``."""
    engine = AvailabilityEngine(repository, rules)
    async with _booking_guard(rules, date):
        decision = await engine.check(date, time, guests)
        if not decision.available:
            logger.info(
                "Rejected booking %s %s for %d guests: %s",
                date.isoformat(),
                time.strftime("%H:%M"),
                guests,
                decision.reason.value,
            )
        _raise_if_unavailable(decision)
        reservation = await repository.add_reservation(
            {
                "date": date,
                "time": time,
                "guests": guests,
                "name": name,
                "email": email,
                "phone": phone,
                "special_requests": special_requests,
            },
            user_id=user_id,
        )
    logger.info(
        "Reservation %s booked %s %s for %d guests (%s, %s)",
        reservation.id,
        reservation.date.isoformat(),
        reservation.time.strftime("%H:%M"),
        reservation.guests,
        mask_email(reservation.email),
        mask_phone(reservation.phone),
    )
    return reservation


async def update_reservation(
    repository: BookingRepository,
    *,
    rules: BookingRules,
    reservation_id: int,
    changes: Mapping[str, Any],
) -> ReservationLike:
    """Apply changes; re-check availability when the date, time or size moves.

    The owning user never changes.
    """
    values = reservation_values(changes)
    current = await repository.get_reservation(reservation_id)
    if current is None:
        raise ReservationNotFoundError(reservation_id)

    original_day = current.date
    target = (
        values.get("date", current.date),
        values.get("time", current.time),
        values.get("guests", current.guests),
    )
    moved = target != (current.date, current.time, current.guests)

    async with _booking_guard(rules, original_day, target[0]):
        if moved:
            engine = AvailabilityEngine(repository, rules)
            decision = await engine.check(*target, exclude_reservation_id=reservation_id)
            if not decision.available:
                logger.info(
                    "Rejected move of reservation %s to %s %s: %s",
                    reservation_id,
                    target[0].isoformat(),
                    target[1].strftime("%H:%M"),
                    decision.reason.value,
                )
            _raise_if_unavailable(decision)
        updated = await repository.update_reservation(reservation_id, values)
    if updated is None:
        raise ReservationNotFoundError(reservation_id)
    logger.info("Reservation %s updated", reservation_id)
    return updated


async def delete_reservation(repository: BookingRepository, *, reservation_id: int) -> None:
    """Cancel a reservation. Freeing a table never needs a capacity check."""
    if not await repository.delete_reservation(reservation_id):
        raise ReservationNotFoundError(reservation_id)
    logger.info("Reservation %s cancelled", reservation_id)
