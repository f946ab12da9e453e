"""In-memory entity store.

Dictionary-backed implementation of :class:`EntityStore`, keyed by entity
id. Predicates are callables ``entity -> bool`` and order keys are callables
``entity -> sortable``. Sessions stage writes and apply them on
``persist()``; staged writes are discarded when the session closes without
persisting. Reads hand out shallow copies so callers cannot change stored
state behind the session's back.

All operations are async to keep interface compatibility with the
SQLAlchemy store.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ADD = "add"
_UPDATE = "update"
_REMOVE = "remove"


class MemoryStoreSession(Generic[T]):
    """Session over a :class:`MemoryEntityStore`."""

    def __init__(self, store: MemoryEntityStore[T]) -> None:
        self._store = store
        self._pending: list[tuple[str, T]] = []

    # --- writes (staged) ---

    async def add(self, entity: T) -> None:
        self._pending.append((_ADD, entity))

    async def add_range(self, entities: Sequence[T]) -> None:
        self._pending.extend((_ADD, entity) for entity in entities)

    async def update(self, entity: T) -> None:
        self._pending.append((_UPDATE, entity))

    async def update_range(self, entities: Sequence[T]) -> None:
        self._pending.extend((_UPDATE, entity) for entity in entities)

    async def remove(self, entity: T) -> None:
        self._pending.append((_REMOVE, entity))

    async def remove_range(self, entities: Sequence[T]) -> None:
        self._pending.extend((_REMOVE, entity) for entity in entities)

    async def persist(self) -> None:
        """Apply staged writes atomically; nothing is applied on error."""
        pending, self._pending = self._pending, []
        async with self._store.lock:
            staged = dict(self._store.rows)
            for action, entity in pending:
                key = _key_of(entity)
                if action == _ADD:
                    if key in staged:
                        raise ValueError(f"duplicate id {key!r}")
                    staged[key] = copy.copy(entity)
                elif action == _UPDATE:
                    if key not in staged:
                        raise LookupError(f"no entity with id {key!r} to update")
                    staged[key] = copy.copy(entity)
                else:
                    staged.pop(key, None)
            self._store.rows = staged

    # --- reads ---

    async def find_by_id(self, entity_id: str) -> T | None:
        row = self._store.rows.get(entity_id)
        return copy.copy(row) if row is not None else None

    async def find_by_ids(self, entity_ids: Sequence[str]) -> list[T]:
        wanted = set(entity_ids)
        return [copy.copy(row) for key, row in self._store.rows.items() if key in wanted]

    async def query(self, predicate: Callable[[T], bool] | None = None) -> list[T]:
        return [copy.copy(row) for row in self._filtered(predicate)]

    async def count(self, predicate: Callable[[T], bool] | None = None) -> int:
        return len(self._filtered(predicate))

    async def exists(self, predicate: Callable[[T], bool] | None = None) -> bool:
        return bool(self._filtered(predicate))

    async def page(
        self,
        page_number: int,
        page_size: int,
        predicate: Callable[[T], bool] | None = None,
        order: Callable[[T], Any] | None = None,
        ascending: bool = True,
    ) -> tuple[list[T], int]:
        rows = self._filtered(predicate)
        if order is not None:
            rows.sort(key=order, reverse=not ascending)
        start = page_number * page_size
        return [copy.copy(row) for row in rows[start : start + page_size]], len(rows)

    def _filtered(self, predicate: Callable[[T], bool] | None) -> list[T]:
        rows = list(self._store.rows.values())
        if predicate is None:
            return rows
        return [row for row in rows if predicate(row)]

    def discard(self) -> None:
        if self._pending:
            logger.debug("Discarding %d unpersisted change(s)", len(self._pending))
        self._pending.clear()


class MemoryEntityStore(Generic[T]):
    """Dictionary-backed :class:`EntityStore`.

    Attributes:
        rows: Committed entities keyed by id.
        open_sessions: Number of sessions currently checked out.
    """

    def __init__(self, entities: Sequence[T] = ()) -> None:
        self.rows: dict[str, T] = {_key_of(entity): copy.copy(entity) for entity in entities}
        self.lock = asyncio.Lock()
        self.open_sessions = 0
        self.sessions_opened = 0

    @asynccontextmanager
    async def session(self) -> AsyncIterator[MemoryStoreSession[T]]:
        session = MemoryStoreSession(self)
        self.open_sessions += 1
        self.sessions_opened += 1
        try:
            yield session
        finally:
            session.discard()
            self.open_sessions -= 1

    def __len__(self) -> int:
        return len(self.rows)


def _key_of(entity: Any) -> str:
    return str(entity.id)
