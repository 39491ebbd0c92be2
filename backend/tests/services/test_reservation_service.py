"""Reservation lifecycle tests."""

from __future__ import annotations

import asyncio
import os
from datetime import date, time

import pytest

from bistro.db.session import get_sessionmaker
from bistro.models import DiningTable
from bistro.repositories.memory import InMemoryBookingRepository
from bistro.repositories.sql import SqlBookingRepository
from bistro.services import reservation_service
from bistro.services.availability_service import AvailabilityEngine, BookingRules
from bistro.services.reservation_service import (
    CapacityConflictError,
    NoEligibleTableError,
    ReservationNotFoundError,
)

pytestmark = pytest.mark.asyncio

DAY = date(2024, 6, 1)
RULES = BookingRules()


def _contact(name: str = "Alex Guest") -> dict[str, str]:
    return {"name": name, "email": "alex@example.com", "phone": "5550102030"}


def _repository(*capacities: int) -> InMemoryBookingRepository:
    repository = InMemoryBookingRepository()
    for capacity in capacities:
        repository.add_table(capacity)
    return repository


async def _create(repository, at: str, guests: int, *, rules: BookingRules = RULES, **extra):
    return await reservation_service.create_reservation(
        repository,
        rules=rules,
        date=DAY,
        time=time.fromisoformat(at),
        guests=guests,
        **{**_contact(), **extra},
    )


async def test_create_persists_reservation() -> None:
    repository = _repository(2, 4)

    reservation = await _create(repository, "19:00", 3, special_requests="Window seat")

    stored = await repository.get_reservation(reservation.id)
    assert stored is not None
    assert stored.guests == 3
    assert stored.special_requests == "Window seat"
    assert stored.user_id is None


async def test_create_keeps_supplied_owner() -> None:
    repository = _repository(2)

    reservation = await _create(repository, "19:00", 2, user_id=42)

    assert reservation.user_id == 42


async def test_create_rejects_full_slot_without_writing() -> None:
    repository = _repository(2)
    await _create(repository, "19:00", 2)

    with pytest.raises(CapacityConflictError) as excinfo:
        await _create(repository, "19:30", 2)

    assert not isinstance(excinfo.value, NoEligibleTableError)
    assert str(excinfo.value) == reservation_service.UNAVAILABLE_MESSAGE
    assert len(await repository.list_reservations(day=DAY)) == 1


async def test_create_rejects_party_no_table_can_seat() -> None:
    repository = _repository(2, 4)

    with pytest.raises(NoEligibleTableError) as excinfo:
        await _create(repository, "19:00", 5)

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.decision.eligible_tables == 0


async def test_tenth_booking_in_window_is_rejected() -> None:
    repository = _repository(2, 2, 4, 4, 6, 8, 2, 4, 12)
    cluster = ["18:00", "18:15", "18:30", "18:45", "19:00", "19:15", "19:30", "19:45", "20:00"]
    for at in cluster:
        await _create(repository, at, 2)

    with pytest.raises(CapacityConflictError):
        await _create(repository, "19:00", 2)


async def test_moving_a_reservation_is_not_double_counted() -> None:
    repository = _repository(4)
    reservation = await _create(repository, "18:00", 4)

    moved = await reservation_service.update_reservation(
        repository,
        rules=RULES,
        reservation_id=reservation.id,
        changes={"time": time(20, 0)},
    )

    assert moved.time == time(20, 0)
    engine = AvailabilityEngine(repository, RULES)
    assert await engine.is_available(DAY, time(18, 0), 4)
    assert not await engine.is_available(DAY, time(20, 0), 4)


async def test_move_within_window_excludes_old_position() -> None:
    repository = _repository(4, 4)
    reservation = await _create(repository, "18:00", 4)
    await _create(repository, "18:30", 4)

    moved = await reservation_service.update_reservation(
        repository,
        rules=RULES,
        reservation_id=reservation.id,
        changes={"time": time(19, 0)},
    )

    assert moved.time == time(19, 0)


async def test_move_into_full_slot_is_rejected() -> None:
    repository = _repository(4)
    first = await _create(repository, "18:00", 4)
    await _create(repository, "20:00", 4)

    with pytest.raises(CapacityConflictError):
        await reservation_service.update_reservation(
            repository,
            rules=RULES,
            reservation_id=first.id,
            changes={"time": time(20, 30)},
        )

    unchanged = await repository.get_reservation(first.id)
    assert unchanged is not None and unchanged.time == time(18, 0)


async def test_contact_only_update_skips_capacity_check() -> None:
    repository = _repository(2)
    overbooked = await repository.add_reservation(
        {"date": DAY, "time": time(19, 0), "guests": 2, **_contact()}
    )
    await repository.add_reservation(
        {"date": DAY, "time": time(19, 0), "guests": 2, **_contact("Sam Guest")}
    )

    updated = await reservation_service.update_reservation(
        repository,
        rules=RULES,
        reservation_id=overbooked.id,
        changes={"name": "Alexandra Guest", "guests": 2},
    )

    assert updated.name == "Alexandra Guest"


async def test_update_preserves_owner() -> None:
    repository = _repository(4)
    reservation = await _create(repository, "19:00", 2, user_id=7)

    updated = await reservation_service.update_reservation(
        repository,
        rules=RULES,
        reservation_id=reservation.id,
        changes={"guests": 4},
    )
    assert updated.user_id == 7

    with pytest.raises(ValueError):
        await reservation_service.update_reservation(
            repository,
            rules=RULES,
            reservation_id=reservation.id,
            changes={"user_id": 8},
        )


async def test_update_and_delete_unknown_reservation() -> None:
    repository = _repository(2)

    with pytest.raises(ReservationNotFoundError):
        await reservation_service.update_reservation(
            repository, rules=RULES, reservation_id=99, changes={"guests": 2}
        )
    with pytest.raises(ReservationNotFoundError):
        await reservation_service.delete_reservation(repository, reservation_id=99)


async def test_delete_frees_the_table() -> None:
    repository = _repository(2)
    reservation = await _create(repository, "19:00", 2)

    await reservation_service.delete_reservation(
        repository, reservation_id=reservation.id
    )

    assert await repository.get_reservation(reservation.id) is None
    await _create(repository, "19:00", 2)


class _YieldingRepository(InMemoryBookingRepository):
    """Suspends between the availability read and the write, like a real database."""

    async def list_reservations_on(self, day, *, exclude_id=None):
        result = await super().list_reservations_on(day, exclude_id=exclude_id)
        await asyncio.sleep(0)
        return result


async def test_concurrent_creates_race_by_default() -> None:
    repository = _YieldingRepository()
    repository.add_table(2)

    results = await asyncio.gather(
        _create(repository, "19:00", 2),
        _create(repository, "19:00", 2),
        return_exceptions=True,
    )

    assert not any(isinstance(result, Exception) for result in results)
    assert len(await repository.list_reservations(day=DAY)) == 2


async def test_serialized_creates_reject_the_second_booking() -> None:
    repository = _YieldingRepository()
    repository.add_table(2)
    rules = BookingRules(serialize_bookings=True)

    results = await asyncio.gather(
        _create(repository, "19:00", 2, rules=rules),
        _create(repository, "19:00", 2, rules=rules),
        return_exceptions=True,
    )

    failures = [result for result in results if isinstance(result, Exception)]
    assert len(failures) == 1
    assert isinstance(failures[0], CapacityConflictError)
    assert len(await repository.list_reservations(day=DAY)) == 1


async def test_sql_repository_sees_writes_from_other_sessions(reset_database: None) -> None:
    sessionmaker = get_sessionmaker(os.environ["DATABASE_URL"])
    async with sessionmaker() as session:
        session.add_all(
            [
                DiningTable(name="Table 1", capacity=2, location="Main"),
                DiningTable(name="Table 2", capacity=4, location="Main"),
                DiningTable(name="Retired", capacity=12, location="Main", is_active=False),
            ]
        )
        await session.commit()

    async with sessionmaker() as session:
        writer = SqlBookingRepository(session)
        first = await _create(writer, "19:00", 2)
        await _create(writer, "19:15", 2)
        assert first.id is not None

    async with sessionmaker() as session:
        reader = SqlBookingRepository(session)
        engine = AvailabilityEngine(reader, RULES)
        assert not await engine.is_available(DAY, time(19, 0), 2)
        assert await engine.is_available(DAY, time(19, 0), 2, exclude_reservation_id=first.id)
        assert not await engine.is_available(DAY, time(19, 0), 6)
        assert await engine.available_times(DAY, 2) == [
            time(17, 0),
            time(17, 30),
            time(20, 30),
            time(21, 0),
            time(21, 30),
        ]

        await reservation_service.delete_reservation(reader, reservation_id=first.id)
        assert await engine.is_available(DAY, time(19, 0), 2)
