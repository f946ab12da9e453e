"""Tests for the SQLAlchemy-backed entity store and repository wiring."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import Mapped, mapped_column

from repokit.domain.codes import RepositoryErrorCode as Code
from repokit.infrastructure.database import (
    Base,
    EntityMixin,
    SoftDeleteMixin,
    SqlAlchemyEntityStore,
    create_db_engine,
    create_session_factory,
    init_models,
)
from repokit.infrastructure.repositories import BaseRepository


class Invoice(SoftDeleteMixin, EntityMixin, Base):
    __tablename__ = "invoices"

    amount: Mapped[int] = mapped_column(default=0)


class Tag(EntityMixin, Base):
    __tablename__ = "tags"

    label: Mapped[str] = mapped_column(default="")


@pytest.fixture
def invoices(db_engine: AsyncEngine) -> BaseRepository[Invoice]:
    store = SqlAlchemyEntityStore(create_session_factory(db_engine), Invoice)
    return BaseRepository(store, Invoice)


async def _seed(repo: BaseRepository[Invoice], *amounts: int) -> list[str]:
    return (await repo.add_range([Invoice(amount=a) for a in amounts])).unwrap()


class TestEngine:
    @pytest.mark.asyncio
    async def test_init_models_creates_tables(self, db_engine: AsyncEngine) -> None:
        async with db_engine.connect() as conn:
            names = await conn.run_sync(lambda sync: inspect(sync).get_table_names())
        assert {"invoices", "tags"} <= set(names)

    @pytest.mark.asyncio
    async def test_init_models_is_idempotent(self, db_engine: AsyncEngine) -> None:
        await init_models(db_engine)

    @pytest.mark.asyncio
    async def test_in_memory_engine(self) -> None:
        engine = create_db_engine("sqlite+aiosqlite:///:memory:")
        try:
            await init_models(engine)
        finally:
            await engine.dispose()


class TestRepositoryOverSql:
    @pytest.mark.asyncio
    async def test_add_and_get(self, invoices: BaseRepository[Invoice]) -> None:
        new_id = (await invoices.add(Invoice(amount=12))).unwrap()
        assert new_id.startswith("INV")
        found = (await invoices.get_by_id(new_id)).unwrap()
        assert found.amount == 12
        assert found.created is not None

    @pytest.mark.asyncio
    async def test_get_missing(self, invoices: BaseRepository[Invoice]) -> None:
        assert (await invoices.get_by_id("nope")).has_code(Code.ENTITY_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_find_count_exists(self, invoices: BaseRepository[Invoice]) -> None:
        await _seed(invoices, 5, 15, 25)
        found = (await invoices.find(Invoice.amount > 10)).unwrap()
        assert sorted(i.amount for i in found) == [15, 25]
        assert (await invoices.count()).unwrap() == 3
        assert (await invoices.count(Invoice.amount < 10)).unwrap() == 1
        assert (await invoices.exists(Invoice.amount == 25)).unwrap() is True
        assert (await invoices.exists(Invoice.amount == 99)).unwrap() is False

    @pytest.mark.asyncio
    async def test_paging(self, invoices: BaseRepository[Invoice]) -> None:
        await _seed(invoices, *range(12))
        page = (await invoices.get_all_paged(1, 5, Invoice.amount)).unwrap()
        assert [i.amount for i in page] == [5, 6, 7, 8, 9]
        assert page.total_count == 12
        assert page.total_pages == 3
        page = (
            await invoices.find_paged(0, 2, Invoice.amount >= 6, Invoice.amount, False)
        ).unwrap()
        assert [i.amount for i in page] == [11, 10]
        assert page.total_count == 6

    @pytest.mark.asyncio
    async def test_update(self, invoices: BaseRepository[Invoice]) -> None:
        (new_id,) = await _seed(invoices, 1)
        invoice = (await invoices.get_by_id(new_id)).unwrap()
        invoice.amount = 100
        assert (await invoices.update(invoice)).is_success
        assert (await invoices.get_by_id(new_id)).unwrap().amount == 100

    @pytest.mark.asyncio
    async def test_update_missing_fails(self, invoices: BaseRepository[Invoice]) -> None:
        result = await invoices.update(Invoice(id="ghost", amount=5))
        assert result.has_code(Code.UPDATE_ENTITY_FAILURE)
        assert result.error is not None
        assert isinstance(result.error.exception, LookupError)
        assert (await invoices.count()).unwrap() == 0

    @pytest.mark.asyncio
    async def test_update_range_with_missing_fails(
        self, invoices: BaseRepository[Invoice]
    ) -> None:
        (new_id,) = await _seed(invoices, 1)
        known = (await invoices.get_by_id(new_id)).unwrap()
        known.amount = 50
        result = await invoices.update_range([known, Invoice(id="ghost", amount=5)])
        assert result.has_code(Code.UPDATE_ENTITIES_FAILURE)
        assert (await invoices.count()).unwrap() == 1
        assert (await invoices.get_by_id(new_id)).unwrap().amount == 1

    @pytest.mark.asyncio
    async def test_delete_and_delete_range(self, invoices: BaseRepository[Invoice]) -> None:
        first, second, third = await _seed(invoices, 1, 2, 3)
        assert (await invoices.delete(first)).is_success
        result = await invoices.delete_range([second, "missing"])
        assert result.data == [second, "missing"]
        assert result.metadata["missing_ids"] == ["missing"]
        remaining = (await invoices.get_all()).unwrap()
        assert [i.id for i in remaining] == [third]

    @pytest.mark.asyncio
    async def test_soft_delete(self, invoices: BaseRepository[Invoice]) -> None:
        (new_id,) = await _seed(invoices, 1)
        assert (await invoices.soft_delete(new_id)).is_success
        assert (await invoices.get_by_id(new_id)).unwrap().is_deleted is True

    @pytest.mark.asyncio
    async def test_soft_delete_unsupported(self, db_engine: AsyncEngine) -> None:
        store = SqlAlchemyEntityStore(create_session_factory(db_engine), Tag)
        tags = BaseRepository(store, Tag)
        tag_id = (await tags.add(Tag(label="x"))).unwrap()
        assert (await tags.soft_delete(tag_id)).has_code(Code.SOFT_DELETE_NOT_SUPPORTED)

    @pytest.mark.asyncio
    async def test_duplicate_id_is_add_failure(self, invoices: BaseRepository[Invoice]) -> None:
        await invoices.add(Invoice(id="INV-1"), auto_id=False)
        result = await invoices.add(Invoice(id="INV-1"), auto_id=False)
        assert result.has_code(Code.ADD_ENTITY_FAILURE)
        assert result.error is not None
        assert result.error.exception is not None
