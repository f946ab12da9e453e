"""Shared pytest fixtures for repokit tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from click.testing import CliRunner
from sqlalchemy.ext.asyncio import AsyncEngine

from repokit.infrastructure.database import create_db_engine, init_models
from repokit.infrastructure.memory import MemoryEntityStore
from repokit.infrastructure.repositories import BaseRepository
from tests.entities import Note, Order


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    repokit_logger = logging.getLogger("repokit")
    repokit_level = repokit_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    repokit_logger.setLevel(repokit_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def order_store() -> MemoryEntityStore[Order]:
    return MemoryEntityStore()


@pytest.fixture
def orders(order_store: MemoryEntityStore[Order]) -> BaseRepository[Order]:
    return BaseRepository(order_store, Order)


@pytest.fixture
def notes() -> BaseRepository[Note]:
    return BaseRepository(MemoryEntityStore(), Note)


@pytest_asyncio.fixture
async def db_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """SQLite engine on a temp file with all mapped tables created."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'repokit.db'}")
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty temp dir so no repokit.toml is discovered."""
    monkeypatch.delenv("REPOKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
