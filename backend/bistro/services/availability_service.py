"""Table availability checks and bookable slot enumeration."""

from __future__ import annotations

import enum
import logging
from bisect import bisect_left
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from bistro.core.config import Settings
from bistro.repositories.base import BookingRepository, ReservationLike, TableLike

logger = logging.getLogger(__name__)

OCCUPANCY_MODES = ("headcount", "table_match")


@dataclass(frozen=True, slots=True)
class BookingRules:
    """Operating hours and booking limits for the restaurant.

    Attributes:
        opening_hour: First bookable hour (inclusive).
        closing_hour: Hour at which slots stop (exclusive).
        slot_minutes: Spacing between canonical slots.
        overlap_minutes: Two bookings closer than this share a table window.
        max_party_size: Largest party accepted for online bookings.
        horizon_days: How many days ahead availability may be requested.
        timezone: IANA zone that defines the restaurant's "today".
        occupancy_mode: ``headcount`` or ``table_match``.
        serialize_bookings: Guard check-then-write with a per-date lock.
    """

    opening_hour: int = 17
    closing_hour: int = 22
    slot_minutes: int = 30
    overlap_minutes: int = 90
    max_party_size: int = 12
    horizon_days: int = 60
    timezone: str = "UTC"
    occupancy_mode: str = "headcount"
    serialize_bookings: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.opening_hour < self.closing_hour <= 24:
            raise ValueError(
                "Opening hour must precede closing hour within a single day, "
                f"got {self.opening_hour}-{self.closing_hour}"
            )
        if self.slot_minutes <= 0:
            raise ValueError(f"slot_minutes must be positive, got {self.slot_minutes}")
        if 60 % self.slot_minutes and self.slot_minutes % 60:
            raise ValueError(
                f"slot_minutes must divide an hour or be whole hours, got {self.slot_minutes}"
            )
        if self.overlap_minutes <= 0:
            raise ValueError(
                f"overlap_minutes must be positive, got {self.overlap_minutes}"
            )
        if self.max_party_size < 1:
            raise ValueError("max_party_size must be at least 1")
        if self.horizon_days < 0:
            raise ValueError("horizon_days cannot be negative")
        if self.occupancy_mode not in OCCUPANCY_MODES:
            raise ValueError(f"Unknown occupancy mode {self.occupancy_mode!r}")

    @classmethod
    def from_settings(cls, settings: Settings) -> BookingRules:
        return cls(
            opening_hour=settings.opening_hour,
            closing_hour=settings.closing_hour,
            slot_minutes=settings.time_slot_minutes,
            overlap_minutes=settings.overlap_threshold_minutes,
            max_party_size=settings.max_party_size,
            horizon_days=settings.booking_horizon_days,
            timezone=settings.restaurant_timezone,
            occupancy_mode=settings.occupancy_mode,
            serialize_bookings=settings.serialize_bookings,
        )

    def slot_times(self) -> list[time]:
        """Canonical slots from opening (inclusive) to closing (exclusive)."""
        return [
            time(minute // 60, minute % 60)
            for minute in range(
                self.opening_hour * 60, self.closing_hour * 60, self.slot_minutes
            )
        ]

    def today(self) -> date:
        return datetime.now(ZoneInfo(self.timezone)).date()


def check_booking_window(day: date, rules: BookingRules, *, today: date | None = None) -> None:
    """Reject dates in the past or beyond the booking horizon."""
    today = today or rules.today()
    if day < today:
        raise ValueError("Date must be today or in the future")
    if day > today + timedelta(days=rules.horizon_days):
        raise ValueError(
            f"Reservations can only be made up to {rules.horizon_days} days in advance"
        )


def minutes_apart(first: time, second: time) -> int:
    """Absolute distance between two times of day, in whole minutes."""
    return abs((first.hour * 60 + first.minute) - (second.hour * 60 + second.minute))


class AvailabilityReason(str, enum.Enum):
    AVAILABLE = "available"
    NO_ELIGIBLE_TABLE = "no_eligible_table"
    CAPACITY_CONFLICT = "capacity_conflict"


@dataclass(frozen=True, slots=True)
class AvailabilityDecision:
    """Outcome of a single availability check."""

    reason: AvailabilityReason
    eligible_tables: int
    occupying: int

    @property
    def available(self) -> bool:
        return self.reason is AvailabilityReason.AVAILABLE


class OccupancyPolicy(Protocol):
    """Decides whether a party fits among contending reservations."""

    name: str

    def evaluate(
        self,
        party_size: int,
        tables: Sequence[TableLike],
        contenders: Sequence[ReservationLike],
    ) -> AvailabilityDecision:
        ...


def _seatable(guests: int, tables: Sequence[TableLike]) -> bool:
    return any(table.capacity >= guests for table in tables)


class HeadcountPolicy:
    """Counts each seatable contender as one eligible table in use.

    This does not check which tables the contenders would actually sit at, so
    mixed party sizes can be over- or under-counted.
    """

    name = "headcount"

    def evaluate(
        self,
        party_size: int,
        tables: Sequence[TableLike],
        contenders: Sequence[ReservationLike],
    ) -> AvailabilityDecision:
        eligible = [table for table in tables if table.capacity >= party_size]
        occupying = sum(1 for reservation in contenders if _seatable(reservation.guests, eligible))
        if len(eligible) > occupying:
            reason = AvailabilityReason.AVAILABLE
        else:
            reason = AvailabilityReason.CAPACITY_CONFLICT
        return AvailabilityDecision(
            reason=reason, eligible_tables=len(eligible), occupying=occupying
        )


class TableMatchPolicy:
    """Seats every contender and the new party at distinct tables.

    Parties are placed largest first, each at the smallest free table that
    holds it; with "capacity >= guests" as the only constraint this finds a
    seating whenever one exists.
    """

    name = "table_match"

    def evaluate(
        self,
        party_size: int,
        tables: Sequence[TableLike],
        contenders: Sequence[ReservationLike],
    ) -> AvailabilityDecision:
        eligible_count = sum(1 for table in tables if table.capacity >= party_size)
        seated = [r.guests for r in contenders if _seatable(r.guests, tables)]
        free = sorted(table.capacity for table in tables)
        reason = AvailabilityReason.AVAILABLE
        for guests in sorted([party_size, *seated], reverse=True):
            index = bisect_left(free, guests)
            if index == len(free):
                reason = AvailabilityReason.CAPACITY_CONFLICT
                break
            free.pop(index)
        return AvailabilityDecision(
            reason=reason, eligible_tables=eligible_count, occupying=len(seated)
        )


def policy_for(mode: str) -> OccupancyPolicy:
    if mode == HeadcountPolicy.name:
        return HeadcountPolicy()
    if mode == TableMatchPolicy.name:
        return TableMatchPolicy()
    raise ValueError(f"Unknown occupancy mode {mode!r}")


class AvailabilityEngine:
    """Answers "can this party be seated?" for a date and time.

    Reads only; the repository is queried on every call so results always
    reflect the latest committed reservations.
    """

    def __init__(
        self,
        repository: BookingRepository,
        rules: BookingRules | None = None,
        policy: OccupancyPolicy | None = None,
    ) -> None:
        self.repository = repository
        self.rules = rules or BookingRules()
        self.policy = policy or policy_for(self.rules.occupancy_mode)

    async def check(
        self,
        day: date,
        at: time,
        party_size: int,
        exclude_reservation_id: int | None = None,
    ) -> AvailabilityDecision:
        if party_size < 1:
            raise ValueError("Party size must be at least 1")

        tables = await self.repository.list_tables(active_only=True)
        eligible = sum(1 for table in tables if table.capacity >= party_size)
        if not eligible:
            return AvailabilityDecision(
                reason=AvailabilityReason.NO_ELIGIBLE_TABLE,
                eligible_tables=0,
                occupying=0,
            )

        same_day = await self.repository.list_reservations_on(
            day, exclude_id=exclude_reservation_id
        )
        contenders = [
            reservation
            for reservation in same_day
            if minutes_apart(reservation.time, at) < self.rules.overlap_minutes
        ]
        decision = self.policy.evaluate(party_size, tables, contenders)
        logger.debug(
            "Availability %s %s party=%d: %s (%d eligible, %d occupying)",
            day.isoformat(),
            at.strftime("%H:%M"),
            party_size,
            decision.reason.value,
            decision.eligible_tables,
            decision.occupying,
        )
        return decision

    async def is_available(
        self,
        day: date,
        at: time,
        party_size: int,
        exclude_reservation_id: int | None = None,
    ) -> bool:
        decision = await self.check(day, at, party_size, exclude_reservation_id)
        return decision.available

    async def available_times(self, day: date, party_size: int) -> list[time]:
        """Bookable canonical slots for the date, earliest first."""
        return [
            slot
            for slot in self.rules.slot_times()
            if await self.is_available(day, slot, party_size)
        ]
