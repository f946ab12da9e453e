"""Protocols for the entity store consumed by the generic repository.

A store hands out scoped sessions. Each repository call opens exactly one
session and the store releases it on every exit path. Predicates and order
keys are opaque to the repository: their concrete type belongs to the store
(SQL clauses for the SQLAlchemy store, callables for the in-memory store).
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

Predicate = Any
OrderKey = Any


@runtime_checkable
class StoreSession(Protocol[T]):
    """Unit of work against one entity type. Changes apply on ``persist()``."""

    async def add(self, entity: T) -> None: ...
    async def add_range(self, entities: Sequence[T]) -> None: ...
    async def find_by_id(self, entity_id: str) -> T | None: ...
    async def find_by_ids(self, entity_ids: Sequence[str]) -> list[T]: ...
    async def query(self, predicate: Predicate | None = None) -> list[T]: ...
    async def count(self, predicate: Predicate | None = None) -> int: ...
    async def exists(self, predicate: Predicate | None = None) -> bool: ...
    async def remove(self, entity: T) -> None: ...
    async def remove_range(self, entities: Sequence[T]) -> None: ...
    async def update(self, entity: T) -> None: ...
    async def update_range(self, entities: Sequence[T]) -> None: ...
    async def persist(self) -> None: ...
    async def page(
        self,
        page_number: int,
        page_size: int,
        predicate: Predicate | None = None,
        order: OrderKey | None = None,
        ascending: bool = True,
    ) -> tuple[list[T], int]: ...


@runtime_checkable
class EntityStore(Protocol[T]):
    """Factory for scoped :class:`StoreSession` instances."""

    def session(self) -> AbstractAsyncContextManager[StoreSession[T]]: ...
