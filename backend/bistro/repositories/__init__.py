"""Storage backends consumed by the availability engine."""

from bistro.repositories.base import (
    BookingRepository,
    ReservationLike,
    ReservationRecord,
    TableLike,
    TableRecord,
)
from bistro.repositories.memory import InMemoryBookingRepository
from bistro.repositories.sql import SqlBookingRepository

__all__ = [
    "BookingRepository",
    "InMemoryBookingRepository",
    "ReservationLike",
    "ReservationRecord",
    "SqlBookingRepository",
    "TableLike",
    "TableRecord",
]
