"""Engine and session factories keyed by database URL."""

from __future__ import annotations

from collections.abc import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bistro.core.config import get_settings

_engines: dict[str, AsyncEngine] = {}
_factories: dict[str, async_sessionmaker[AsyncSession]] = {}


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE clauses unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(url: str) -> AsyncEngine:
    engine = create_async_engine(url, echo=False, pool_pre_ping=True)
    if make_url(url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Session factory for ``database_url`` (the configured URL by default).

    Factories are cached so every request against the same database shares one
    connection pool.
    """
    url = database_url or get_settings().database_url
    factory = _factories.get(url)
    if factory is None:
        engine = _engines[url] = _build_engine(url)
        factory = _factories[url] = async_sessionmaker(
            engine, expire_on_commit=False, class_=AsyncSession
        )
    return factory


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as session:
        yield session


async def ping(session: AsyncSession) -> bool:
    """True when the database answers a trivial query."""
    result = await session.execute(text("SELECT 1"))
    return result.scalar_one() == 1


async def dispose_engine(database_url: str | None = None) -> None:
    """Close the pool for a database URL and forget its factory."""
    url = database_url or get_settings().database_url
    _factories.pop(url, None)
    engine = _engines.pop(url, None)
    if engine is not None:
        await engine.dispose()
