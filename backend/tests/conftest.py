"""Test fixtures for the reservation backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from bistro.core.config import get_settings
from bistro.core.security import get_password_hash
from bistro.db.base import Base
from bistro.db.session import dispose_engine, get_sessionmaker
from bistro.main import app
from bistro.models import DiningTable, User, UserRole, UserStatus
from bistro.services.bootstrap_service import SAMPLE_TABLES


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: None, db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client with the sample floor plan and two users."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Adm1nPass!"
    diner_password = "D1nerPass!"

    async with sessionmaker() as session:
        session.add_all(
            DiningTable(name=name, capacity=capacity, location=location)
            for name, capacity, location in SAMPLE_TABLES
        )
        admin = User(
            email="manager@example.com",
            hashed_password=get_password_hash(admin_password),
            name="Casey Manager",
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        diner = User(
            email="diner@example.com",
            hashed_password=get_password_hash(diner_password),
            name="Robin Diner",
            phone="5551234567",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        session.add_all([admin, diner])
        await session.commit()

        context: dict[str, object] = {
            "admin_id": admin.id,
            "admin_email": admin.email,
            "admin_password": admin_password,
            "diner_id": diner.id,
            "diner_email": diner.email,
            "diner_password": diner_password,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
