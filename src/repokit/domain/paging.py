"""PagedList: one page of an ordered sequence plus navigation metadata.

Page numbers are zero-based throughout: page ``0`` is the first page and the
store offset for page ``n`` is ``n * page_size``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar, overload

T = TypeVar("T")


@dataclass(frozen=True)
class PagedList(Generic[T]):
    """Immutable view over the items of a single page.

    Derived values (``total_pages`` and the ``has_*`` predicates) are
    computed from the stored counts on every access.
    """

    items: tuple[T, ...]
    total_count: int
    page_number: int
    page_size: int
    next_page: str | None = field(default=None, compare=False)
    previous_page: str | None = field(default=None, compare=False)

    def __init__(
        self,
        items: Iterable[T],
        total_count: int,
        page_number: int,
        page_size: int,
        next_page: str | None = None,
        previous_page: str | None = None,
    ) -> None:
        object.__setattr__(self, "items", tuple(items))
        object.__setattr__(self, "total_count", total_count)
        object.__setattr__(self, "page_number", page_number)
        object.__setattr__(self, "page_size", page_size)
        object.__setattr__(self, "next_page", next_page)
        object.__setattr__(self, "previous_page", previous_page)
        self._validate()

    def _validate(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.page_number < 0:
            raise ValueError(f"page_number must be >= 0, got {self.page_number}")
        if self.total_count < 0:
            raise ValueError(f"total_count must be >= 0, got {self.total_count}")
        if len(self.items) > self.page_size:
            raise ValueError(
                f"page holds {len(self.items)} items but page_size is {self.page_size}"
            )

    @classmethod
    def empty(cls, page_number: int = 0, page_size: int = 10) -> PagedList[T]:
        return cls((), 0, page_number, page_size)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 0

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages - 1

    def with_links(
        self,
        *,
        next_page: str | None = None,
        previous_page: str | None = None,
    ) -> PagedList[T]:
        """Return a copy carrying navigation links."""
        return replace(self, next_page=next_page, previous_page=previous_page)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly mapping; unset links are omitted."""
        payload: dict[str, Any] = {
            "items": list(self.items),
            "total_count": self.total_count,
            "page_number": self.page_number,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_previous_page": self.has_previous_page,
            "has_next_page": self.has_next_page,
        }
        if self.next_page is not None:
            payload["next_page"] = self.next_page
        if self.previous_page is not None:
            payload["previous_page"] = self.previous_page
        return payload

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index: int | slice) -> T | tuple[T, ...]:
        return self.items[index]
