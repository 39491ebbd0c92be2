"""ORM models package export."""

from bistro.models.reservation import Reservation
from bistro.models.table import DiningTable
from bistro.models.user import User, UserRole, UserStatus

__all__ = [
    "DiningTable",
    "Reservation",
    "User",
    "UserRole",
    "UserStatus",
]
