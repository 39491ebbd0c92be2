"""Seed the sample floor plan and a local admin account."""
from __future__ import annotations

import asyncio

from bistro.db.session import get_sessionmaker
from bistro.models import UserRole
from bistro.schemas.user import UserCreate
from bistro.services.bootstrap_service import seed_sample_tables
from bistro.services.user_service import create_user, get_user_by_email

EMAIL = "admin@bistronouveau.com"
PASSWORD = "admin1234"


async def main() -> None:
    added = await seed_sample_tables()
    print(f"Added {added} sample tables")

    async with get_sessionmaker()() as session:
        if await get_user_by_email(session, EMAIL):
            print(f"User {EMAIL} already exists")
            return
        await create_user(
            session,
            UserCreate(email=EMAIL, password=PASSWORD, name="Dev Admin", role=UserRole.ADMIN),
        )
    print(f"Created admin {EMAIL} / {PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
