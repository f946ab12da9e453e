"""Async SQLAlchemy engine, declarative base, and entity store."""

from repokit.infrastructure.database.engine import (
    create_db_engine,
    create_session_factory,
    init_models,
)
from repokit.infrastructure.database.schema import Base, EntityMixin, SoftDeleteMixin
from repokit.infrastructure.database.store import SqlAlchemyEntityStore, SqlAlchemyStoreSession

__all__ = [
    "Base",
    "EntityMixin",
    "SoftDeleteMixin",
    "SqlAlchemyEntityStore",
    "SqlAlchemyStoreSession",
    "create_db_engine",
    "create_session_factory",
    "init_models",
]
