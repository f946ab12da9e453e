"""Entity store backed by an async SQLAlchemy session factory.

Predicates are SQLAlchemy boolean clauses (``Order.total > 10``) and order
keys are columns or expressions (``Order.created``). ``persist()`` commits;
closing the session without persisting rolls back.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import ColumnElement, Select

T = TypeVar("T")


class SqlAlchemyStoreSession(Generic[T]):
    """Store session wrapping one :class:`AsyncSession` for mapped class *model*."""

    def __init__(self, session: AsyncSession, model: type[T]) -> None:
        self._session = session
        self._model = model

    @property
    def session(self) -> AsyncSession:
        return self._session

    def _select(self, predicate: ColumnElement[bool] | None = None) -> Select[Any]:
        stmt = select(self._model)
        if predicate is not None:
            stmt = stmt.where(predicate)
        return stmt

    async def add(self, entity: T) -> None:
        self._session.add(entity)

    async def add_range(self, entities: Sequence[T]) -> None:
        self._session.add_all(entities)

    async def find_by_id(self, entity_id: str) -> T | None:
        return await self._session.get(self._model, entity_id)

    async def find_by_ids(self, entity_ids: Sequence[str]) -> list[T]:
        if not entity_ids:
            return []
        id_column = self._model.id  # type: ignore[attr-defined]
        stmt = select(self._model).where(id_column.in_(list(entity_ids)))
        return list((await self._session.scalars(stmt)).all())

    async def query(self, predicate: ColumnElement[bool] | None = None) -> list[T]:
        return list((await self._session.scalars(self._select(predicate))).all())

    async def count(self, predicate: ColumnElement[bool] | None = None) -> int:
        stmt = select(func.count()).select_from(self._select(predicate).subquery())
        return int((await self._session.execute(stmt)).scalar_one())

    async def exists(self, predicate: ColumnElement[bool] | None = None) -> bool:
        stmt = self._select(predicate).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def remove(self, entity: T) -> None:
        await self._session.delete(entity)

    async def remove_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self._session.delete(entity)

    async def _require_existing(self, entities: Sequence[T]) -> None:
        keys = [entity.id for entity in entities]  # type: ignore[attr-defined]
        id_column = self._model.id  # type: ignore[attr-defined]
        stmt = select(id_column).where(id_column.in_(keys))
        stored = set((await self._session.scalars(stmt)).all())
        for key in keys:
            if key not in stored:
                raise LookupError(f"no entity with id {key!r} to update")

    async def update(self, entity: T) -> None:
        await self._require_existing([entity])
        await self._session.merge(entity)

    async def update_range(self, entities: Sequence[T]) -> None:
        await self._require_existing(entities)
        for entity in entities:
            await self._session.merge(entity)

    async def persist(self) -> None:
        await self._session.commit()

    async def page(
        self,
        page_number: int,
        page_size: int,
        predicate: ColumnElement[bool] | None = None,
        order: Any | None = None,
        ascending: bool = True,
    ) -> tuple[list[T], int]:
        stmt = self._select(predicate)
        total = int(
            (
                await self._session.execute(select(func.count()).select_from(stmt.subquery()))
            ).scalar_one()
        )
        if order is not None:
            stmt = stmt.order_by(order.asc() if ascending else order.desc())
        stmt = stmt.offset(page_number * page_size).limit(page_size)
        items = list((await self._session.scalars(stmt)).all())
        return items, total


class SqlAlchemyEntityStore(Generic[T]):
    """:class:`EntityStore` for one mapped class over an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], model: type[T]) -> None:
        self._session_factory = session_factory
        self.model = model

    @asynccontextmanager
    async def session(self) -> AsyncIterator[SqlAlchemyStoreSession[T]]:
        async with self._session_factory() as session:
            yield SqlAlchemyStoreSession(session, self.model)
