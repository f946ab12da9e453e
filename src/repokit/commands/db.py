"""Command group: database connectivity for the SQLAlchemy store."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import click

from repokit.commands._base import RepokitGroup

if TYPE_CHECKING:
    from repokit.commands._context import AppContext

DATABASE_UNREACHABLE = "database_unreachable"


@click.group(
    cls=RepokitGroup,
    examples="""\
  repokit db check
  REPOKIT_DATABASE__URL=sqlite+aiosqlite:///orders.db repokit --json db check""",
)
def db() -> None:
    """Inspect the configured database."""


async def _inspect_database(url: str, echo: bool) -> dict[str, Any]:
    from sqlalchemy import inspect, text

    from repokit.infrastructure.database import create_db_engine

    engine = create_db_engine(url, echo=echo)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            tables = await conn.run_sync(lambda sync: inspect(sync).get_table_names())
    finally:
        await engine.dispose()
    return {
        "url": engine.url.render_as_string(hide_password=True),
        "dialect": engine.dialect.name,
        "tables": sorted(tables),
    }


@db.command(
    examples="""\
  repokit db check
  repokit -c deploy/repokit.toml db check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Connect to [database] url and list its tables."""
    from sqlalchemy.exc import SQLAlchemyError

    from repokit.services.result import OperationResult

    config = app.settings.database
    try:
        info = asyncio.run(_inspect_database(config.url, config.echo))
    except (SQLAlchemyError, OSError) as exc:
        app.emit(OperationResult.from_exception(exc, DATABASE_UNREACHABLE), "db_check")
        return
    app.emit(OperationResult.success(info), "db_check")
