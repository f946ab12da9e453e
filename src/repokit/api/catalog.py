"""ErrorCatalog: key -> error descriptor lookup loaded from a JSON file.

File format::

    {
      "errors": {
        "entity_not_found": {
          "code": "E404",
          "message": "The requested record does not exist.",
          "details": "Check the id and try again."
        }
      }
    }

A bare top-level mapping of keys to descriptors is accepted as well.

The catalog is an explicit instance: construction loads the file, so there
is no uninitialised state. Lookups read an immutable snapshot. ``reload()``
builds a complete new snapshot and swaps it in one assignment, so readers
see either the old or the new mapping, never a partial one.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class ErrorCatalogError(Exception):
    """The catalog file exists but cannot be parsed into descriptors."""


class ApiError(BaseModel):
    """Client-facing description of one error kind."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    details: str | None = None
    status_code: int | None = None


UNKNOWN_ERROR = ApiError(
    code="unknown_error",
    message="An unknown error occurred.",
    details="No further information is available.",
)


def parse_catalog(raw: str, *, source: str = "<string>") -> dict[str, ApiError]:
    """Parse catalog JSON text into ``{key: ApiError}``.

    Raises:
        ErrorCatalogError: Invalid JSON or descriptor shape.
    """
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ErrorCatalogError(f"Invalid JSON in {source}: {exc}") from exc

    if isinstance(data, dict) and isinstance(data.get("errors"), dict):
        data = data["errors"]
    if not isinstance(data, dict):
        raise ErrorCatalogError(f"{source}: expected an object of error descriptors")

    entries: dict[str, ApiError] = {}
    for key, value in data.items():
        try:
            entries[str(key)] = ApiError.model_validate(value)
        except ValidationError as exc:
            raise ErrorCatalogError(f"{source}: invalid descriptor for {key!r}: {exc}") from exc
    return entries


class ErrorCatalog:
    """Hot-reloadable error descriptor lookup backed by a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        if not self.path.is_file():
            raise FileNotFoundError(f"Error catalog not found: {self.path}")
        self._snapshot: Mapping[str, ApiError] = MappingProxyType(self._read())
        self._mtime = self._stat_mtime()
        self._watch_task: asyncio.Task[None] | None = None
        logger.debug("Loaded %d error descriptors from %s", len(self._snapshot), self.path)

    @classmethod
    def from_mapping(cls, entries: Mapping[str, ApiError], path: Path | str) -> ErrorCatalog:
        """Write *entries* to *path* and load a catalog from it."""
        payload = {
            "errors": {key: err.model_dump(exclude_none=True) for key, err in entries.items()}
        }
        Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return cls(path)

    def _read(self) -> dict[str, ApiError]:
        return parse_catalog(self.path.read_text(encoding="utf-8"), source=str(self.path))

    def _stat_mtime(self) -> int | None:
        try:
            return self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    # --- lookup ---

    def get(self, key: str) -> ApiError:
        """Descriptor for *key*, or :data:`UNKNOWN_ERROR` when absent."""
        return self._snapshot.get(key, UNKNOWN_ERROR)

    def get_many(self, keys: list[str]) -> list[ApiError]:
        return [self.get(key) for key in keys]

    def keys(self) -> list[str]:
        return list(self._snapshot)

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[str]:
        return iter(self._snapshot)

    # --- reload ---

    def reload(self) -> bool:
        """Re-read the file and swap in the new snapshot.

        Returns False, keeping the current snapshot, when the file is missing
        or malformed.
        """
        try:
            entries = self._read()
        except (OSError, ErrorCatalogError):
            logger.warning(
                "Error catalog reload failed; keeping %d entries", len(self), exc_info=True
            )
            self._mtime = self._stat_mtime()
            return False
        self._snapshot = MappingProxyType(entries)
        self._mtime = self._stat_mtime()
        logger.info("Reloaded %d error descriptors from %s", len(entries), self.path)
        return True

    def changed(self) -> bool:
        """Whether the file's modification time differs from the loaded one."""
        mtime = self._stat_mtime()
        return mtime is not None and mtime != self._mtime

    async def watch(self, interval: float = 1.0) -> None:
        """Poll the file every *interval* seconds and reload on change.

        Reloads run in a worker thread.
        Runs until cancelled.
        """
        while True:
            await asyncio.sleep(interval)
            if self.changed():
                await asyncio.to_thread(self.reload)

    def start_watching(self, interval: float = 1.0) -> asyncio.Task[None]:
        """Start :meth:`watch` as a task on the running loop (idempotent)."""
        if self._watch_task is None or self._watch_task.done():
            self._watch_task = asyncio.get_running_loop().create_task(self.watch(interval))
        return self._watch_task

    async def stop_watching(self) -> None:
        task, self._watch_task = self._watch_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
