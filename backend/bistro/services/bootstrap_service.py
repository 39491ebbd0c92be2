"""Startup data: sample floor plan and the first admin."""

from __future__ import annotations

import logging

from sqlalchemy import func, select

from bistro.core.config import get_settings
from bistro.db.session import get_sessionmaker
from bistro.models import DiningTable, UserRole
from bistro.schemas.user import UserCreate
from bistro.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

SAMPLE_TABLES: tuple[tuple[str, int, str], ...] = (
    ("Table 1", 2, "Main"),
    ("Table 2", 2, "Main"),
    ("Table 3", 4, "Main"),
    ("Table 4", 4, "Main"),
    ("Table 5", 6, "Main"),
    ("Table 6", 8, "Main"),
    ("Patio 1", 2, "Outdoor"),
    ("Patio 2", 4, "Outdoor"),
    ("Private Room", 12, "Private"),
)


async def seed_sample_tables() -> int:
    """Insert the sample floor plan when no tables exist. Returns rows added."""
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        existing = (
            await session.execute(select(func.count()).select_from(DiningTable))
        ).scalar_one()
        if existing:
            return 0
        session.add_all(
            DiningTable(name=name, capacity=capacity, location=location)
            for name, capacity, location in SAMPLE_TABLES
        )
        await session.commit()
    logger.info("Seeded %d sample tables", len(SAMPLE_TABLES))
    return len(SAMPLE_TABLES)


async def ensure_default_admin() -> None:
    """Create the configured admin user if it does not exist yet."""
    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        return
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        if await get_user_by_email(session, settings.bootstrap_admin_email):
            return
        await create_user(
            session,
            UserCreate(
                email=settings.bootstrap_admin_email,
                password=settings.bootstrap_admin_password,
                name="Administrator",
                role=UserRole.ADMIN,
            ),
        )
    logger.info("Created bootstrap admin account")
