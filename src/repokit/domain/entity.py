"""Entity contract: the shape every generically managed record satisfies.

Capabilities are structural: any class exposing the attributes below is an
:class:`Entity`, and any entity that also exposes ``is_deleted`` is
:class:`SoftDeletable`. The repository never inspects attribute names at
runtime beyond these protocol checks.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Entity(Protocol):
    """Persisted record with a unique string id and audit timestamps."""

    id: str
    created: datetime
    last_modified: datetime


@runtime_checkable
class SoftDeletable(Entity, Protocol):
    """Entity that can be flagged as deleted instead of being removed."""

    is_deleted: bool | None


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def supports_soft_delete(entity_type: type, entity: object | None = None) -> bool:
    """Whether records of *entity_type* carry a deletable flag.

    Checks the instance when given (dataclass and pydantic fields only show
    up on instances), otherwise the class attributes.
    """
    if entity is not None:
        return isinstance(entity, SoftDeletable)
    return hasattr(entity_type, "is_deleted")
