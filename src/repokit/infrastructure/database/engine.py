"""Async engine and session factory setup.

File-backed SQLite databases get WAL mode and foreign keys on connect.
Other backends are configured purely through the URL.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from repokit.infrastructure.database.schema import Base


def create_db_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine for *url*."""
    engine = create_async_engine(url, echo=echo)

    if engine.dialect.name == "sqlite":
        in_memory = engine.url.database in (None, "", ":memory:")

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay readable after commit."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_models(engine: AsyncEngine, metadata: MetaData | None = None) -> None:
    """Create all tables of *metadata* (default: :data:`Base.metadata`).

    Idempotent: existing tables are left alone.
    """
    target = metadata if metadata is not None else Base.metadata
    async with engine.begin() as conn:
        await conn.run_sync(target.create_all)
