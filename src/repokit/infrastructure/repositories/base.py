"""BaseRepository: uniform CRUD and query operations over an entity store.

INVARIANT: Every public operation returns an OperationResult. Exceptions
raised by the store are caught at the operation boundary, logged, and turned
into a failure tagged with the operation's error code. Nothing is re-raised
except task cancellation (``asyncio.CancelledError``), which is left to
propagate so cancellation keeps its asyncio semantics.

Each call opens its own store session and releases it on every exit path,
so independent calls may run concurrently without coordination.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Generic, TypeVar

import structlog

from repokit.domain.codes import RepositoryErrorCode as Code
from repokit.domain.entity import supports_soft_delete, utc_now
from repokit.domain.ids import assign_id
from repokit.domain.paging import PagedList
from repokit.infrastructure.store import EntityStore, OrderKey, Predicate, StoreSession
from repokit.services.result import OperationResult

T = TypeVar("T")
R = TypeVar("R")

logger = structlog.get_logger(__name__)

_NOT_FOUND = "Entity not found."


class BaseRepository(Generic[T]):
    """Result-typed repository for one entity type.

    Subclass per entity type to add domain-specific queries, or use directly::

        orders = BaseRepository(store, Order)
        result = await orders.get_by_id("ORD24010112000000")
        if not result:
            return OperationResult.from_result(result)

    Only re-wrap failed results: ``OperationResult.from_result`` raises
    ``ValueError`` when handed a success.

    Args:
        store: Scoped-session factory for the entity type.
        entity_type: Class of the managed records; its name seeds id prefixes.
        id_entropy: Append a random suffix to generated ids.
    """

    def __init__(
        self,
        store: EntityStore[T],
        entity_type: type[T],
        *,
        id_entropy: bool = True,
    ) -> None:
        self._store = store
        self._entity_type = entity_type
        self._id_entropy = id_entropy
        self._log = logger.bind(entity=entity_type.__name__)

    @property
    def entity_name(self) -> str:
        return self._entity_type.__name__

    async def _run(
        self,
        op: str,
        code: Code,
        message: str,
        work: Callable[[StoreSession[T]], Awaitable[OperationResult[R]]],
        timeout: float | None,
    ) -> OperationResult[R]:
        """Failure boundary shared by every operation."""
        try:
            async with asyncio.timeout(timeout):
                async with self._store.session() as session:
                    return await work(session)
        except TimeoutError as exc:
            self._log.error(message, op=op, code=str(code), timed_out=True, exc_info=True)
            return OperationResult.failure(
                message, code, exception=exc, metadata={"timed_out": True}
            )
        except Exception as exc:
            self._log.error(message, op=op, code=str(code), exc_info=True)
            return OperationResult.failure(message, code, exception=exc)

    # --- reads ---

    async def get_all(self, *, timeout: float | None = None) -> OperationResult[list[T]]:
        """Fetch every entity."""

        async def work(session: StoreSession[T]) -> OperationResult[list[T]]:
            entities = await session.query()
            self._log.debug("Found entities", op="get_all", ids=_ids(entities))
            return OperationResult.success(entities)

        return await self._run(
            "get_all",
            Code.FETCH_ALL_ENTITIES_FAILURE,
            "Unable to fetch all entities",
            work,
            timeout,
        )

    async def get_all_paged(
        self,
        page_number: int,
        page_size: int,
        order: OrderKey | None = None,
        ascending: bool = True,
        *,
        timeout: float | None = None,
    ) -> OperationResult[PagedList[T]]:
        """Fetch one zero-based page of all entities."""

        async def work(session: StoreSession[T]) -> OperationResult[PagedList[T]]:
            return await self._page(
                session, "get_all_paged", page_number, page_size, None, order, ascending
            )

        return await self._run(
            "get_all_paged",
            Code.FETCH_ALL_ENTITIES_FAILURE,
            "Unable to fetch all entities",
            work,
            timeout,
        )

    async def get_by_id(
        self, entity_id: str, *, timeout: float | None = None
    ) -> OperationResult[T]:
        """Fetch one entity; fails with ``entity_not_found`` when absent."""

        async def work(session: StoreSession[T]) -> OperationResult[T]:
            entity = await session.find_by_id(entity_id)
            if entity is None:
                self._log.debug("Entity not found", op="get_by_id", id=entity_id)
                return OperationResult.failure(_NOT_FOUND, Code.ENTITY_NOT_FOUND)
            self._log.debug("Found entity", op="get_by_id", id=entity_id)
            return OperationResult.success(entity)

        return await self._run(
            "get_by_id", Code.FETCH_ENTITY_FAILURE, "Unable to fetch entity", work, timeout
        )

    async def find(
        self, predicate: Predicate, *, timeout: float | None = None
    ) -> OperationResult[list[T]]:
        """Fetch every entity matching *predicate*."""

        async def work(session: StoreSession[T]) -> OperationResult[list[T]]:
            entities = await session.query(predicate)
            self._log.debug("Found entities", op="find", ids=_ids(entities))
            return OperationResult.success(entities)

        return await self._run(
            "find", Code.FIND_ENTITIES_FAILURE, "Unable to find entities", work, timeout
        )

    async def find_paged(
        self,
        page_number: int,
        page_size: int,
        predicate: Predicate,
        order: OrderKey | None = None,
        ascending: bool = True,
        *,
        timeout: float | None = None,
    ) -> OperationResult[PagedList[T]]:
        """Fetch one zero-based page of the entities matching *predicate*."""

        async def work(session: StoreSession[T]) -> OperationResult[PagedList[T]]:
            return await self._page(
                session, "find_paged", page_number, page_size, predicate, order, ascending
            )

        return await self._run(
            "find_paged", Code.FIND_ENTITIES_FAILURE, "Unable to find entities", work, timeout
        )

    async def _page(
        self,
        session: StoreSession[T],
        op: str,
        page_number: int,
        page_size: int,
        predicate: Predicate | None,
        order: OrderKey | None,
        ascending: bool,
    ) -> OperationResult[PagedList[T]]:
        if page_number < 0 or page_size <= 0:
            raise ValueError(
                f"invalid page request: page_number={page_number}, page_size={page_size}"
            )
        items, total = await session.page(page_number, page_size, predicate, order, ascending)
        self._log.debug("Found page", op=op, page=page_number, total=total, ids=_ids(items))
        return OperationResult.success(PagedList(items, total, page_number, page_size))

    async def count(
        self, predicate: Predicate | None = None, *, timeout: float | None = None
    ) -> OperationResult[int]:
        """Count entities matching *predicate* (all entities when None)."""

        async def work(session: StoreSession[T]) -> OperationResult[int]:
            total = await session.count(predicate)
            self._log.debug("Counted entities", op="count", count=total)
            return OperationResult.success(total)

        return await self._run(
            "count", Code.COUNT_ENTITIES_FAILURE, "Unable to count entities", work, timeout
        )

    async def exists(
        self, predicate: Predicate, *, timeout: float | None = None
    ) -> OperationResult[bool]:
        """Whether any entity matches *predicate*."""

        async def work(session: StoreSession[T]) -> OperationResult[bool]:
            found = await session.exists(predicate)
            self._log.debug("Checked existence", op="exists", exists=found)
            return OperationResult.success(found)

        return await self._run(
            "exists",
            Code.CHECK_ENTITY_EXISTS_FAILURE,
            "Unable to check entity existance",
            work,
            timeout,
        )

    # --- writes ---

    async def add(
        self,
        entity: T,
        auto_id: bool = True,
        custom_prefix: str | None = None,
        *,
        timeout: float | None = None,
    ) -> OperationResult[str]:
        """Stamp, optionally assign an id to, and persist *entity*.

        Returns the entity's id.
        """

        async def work(session: StoreSession[T]) -> OperationResult[str]:
            self._prepare_new(entity, utc_now(), auto_id, custom_prefix)
            await session.add(entity)
            await session.persist()
            entity_id = _id_of(entity)
            self._log.debug("Added entity", op="add", id=entity_id)
            return OperationResult.success(entity_id)

        return await self._run(
            "add", Code.ADD_ENTITY_FAILURE, "Unable to add entity", work, timeout
        )

    async def add_range(
        self,
        entities: Sequence[T],
        auto_id: bool = True,
        custom_prefix: str | None = None,
        *,
        timeout: float | None = None,
    ) -> OperationResult[list[str]]:
        """Stamp and persist *entities* in one batch. Returns their ids in order."""
        batch = list(entities)

        async def work(session: StoreSession[T]) -> OperationResult[list[str]]:
            now = utc_now()
            for entity in batch:
                self._prepare_new(entity, now, auto_id, custom_prefix)
            await session.add_range(batch)
            await session.persist()
            ids = _ids(batch)
            self._log.debug("Added entities", op="add_range", ids=ids)
            return OperationResult.success(ids)

        return await self._run(
            "add_range", Code.ADD_ENTITIES_FAILURE, "Unable to add entities", work, timeout
        )

    def _prepare_new(
        self, entity: T, now: Any, auto_id: bool, custom_prefix: str | None
    ) -> None:
        entity.created = now  # type: ignore[attr-defined]
        entity.last_modified = now  # type: ignore[attr-defined]
        if auto_id:
            assign_id(entity, custom_prefix, now=now, entropy=self._id_entropy)

    async def update(self, entity: T, *, timeout: float | None = None) -> OperationResult[str]:
        """Stamp ``last_modified`` and persist *entity*. Returns its id."""

        async def work(session: StoreSession[T]) -> OperationResult[str]:
            entity.last_modified = utc_now()  # type: ignore[attr-defined]
            await session.update(entity)
            await session.persist()
            entity_id = _id_of(entity)
            self._log.debug("Updated entity", op="update", id=entity_id)
            return OperationResult.success(entity_id)

        return await self._run(
            "update", Code.UPDATE_ENTITY_FAILURE, "Unable to update entity", work, timeout
        )

    async def update_range(
        self, entities: Sequence[T], *, timeout: float | None = None
    ) -> OperationResult[list[str]]:
        """Stamp and persist *entities* in one batch. Returns their ids in order."""
        batch = list(entities)

        async def work(session: StoreSession[T]) -> OperationResult[list[str]]:
            now = utc_now()
            for entity in batch:
                entity.last_modified = now  # type: ignore[attr-defined]
            await session.update_range(batch)
            await session.persist()
            ids = _ids(batch)
            self._log.debug("Updated entities", op="update_range", ids=ids)
            return OperationResult.success(ids)

        return await self._run(
            "update_range", Code.UPDATE_ENTITIES_FAILURE, "Unable to update entities", work, timeout
        )

    async def delete(self, entity_id: str, *, timeout: float | None = None) -> OperationResult[str]:
        """Remove one entity; fails with ``entity_not_found`` when absent."""

        async def work(session: StoreSession[T]) -> OperationResult[str]:
            entity = await session.find_by_id(entity_id)
            if entity is None:
                self._log.debug("Entity not found", op="delete", id=entity_id)
                return OperationResult.failure(_NOT_FOUND, Code.ENTITY_NOT_FOUND)
            await session.remove(entity)
            await session.persist()
            self._log.debug("Deleted entity", op="delete", id=entity_id)
            return OperationResult.success(entity_id)

        return await self._run(
            "delete", Code.DELETE_ENTITY_FAILURE, "Unable to delete entity", work, timeout
        )

    async def delete_range(
        self, entity_ids: Sequence[str], *, timeout: float | None = None
    ) -> OperationResult[list[str]]:
        """Remove every entity whose id is in *entity_ids*.

        Fails with ``entities_not_found`` when none match. On any match the
        result echoes the requested ids; ``metadata`` lists ``matched_ids``
        and ``missing_ids``.
        """
        requested = list(entity_ids)

        async def work(session: StoreSession[T]) -> OperationResult[list[str]]:
            matched = await session.find_by_ids(requested)
            if not matched:
                self._log.debug("No entities found to be deleted", op="delete_range", ids=requested)
                return OperationResult.failure(
                    "No entities found for deletion.", Code.ENTITIES_NOT_FOUND
                )
            await session.remove_range(matched)
            await session.persist()
            matched_ids = _ids(matched)
            found = set(matched_ids)
            result = OperationResult.success(requested)
            result.metadata["matched_ids"] = matched_ids
            result.metadata["missing_ids"] = [i for i in requested if i not in found]
            self._log.debug("Deleted entities", op="delete_range", ids=matched_ids)
            return result

        return await self._run(
            "delete_range", Code.DELETE_ENTITIES_FAILURE, "Unable to delete entities", work, timeout
        )

    async def soft_delete(
        self, entity_id: str, *, timeout: float | None = None
    ) -> OperationResult[str]:
        """Flag one entity as deleted.

        Fails with ``entity_not_found`` when absent, or
        ``soft_delete_not_supported`` when the entity has no deletable flag.
        """

        async def work(session: StoreSession[T]) -> OperationResult[str]:
            entity = await session.find_by_id(entity_id)
            if entity is None:
                self._log.debug("Entity not found", op="soft_delete", id=entity_id)
                return OperationResult.failure(_NOT_FOUND, Code.ENTITY_NOT_FOUND)
            if not supports_soft_delete(self._entity_type, entity):
                self._log.debug("Soft delete not supported", op="soft_delete", id=entity_id)
                return OperationResult.failure(
                    "Soft delete not supported for this entity.", Code.SOFT_DELETE_NOT_SUPPORTED
                )
            entity.is_deleted = True  # type: ignore[attr-defined]
            await session.update(entity)
            await session.persist()
            self._log.debug("Soft deleted entity", op="soft_delete", id=entity_id)
            return OperationResult.success(entity_id)

        return await self._run(
            "soft_delete",
            Code.SOFT_DELETE_ENTITY_FAILURE,
            "Unable to soft delete entity",
            work,
            timeout,
        )


def _id_of(entity: Any) -> str:
    return str(entity.id)


def _ids(entities: Sequence[Any]) -> list[str]:
    return [_id_of(entity) for entity in entities]
