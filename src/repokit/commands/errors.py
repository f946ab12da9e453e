"""Command group: error descriptor catalog inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
import structlog

from repokit.commands._base import RepokitGroup

if TYPE_CHECKING:
    from repokit.api.catalog import ErrorCatalog
    from repokit.commands._context import AppContext
    from repokit.services.result import OperationResult

CATALOG_LOAD_FAILED = "catalog_load_failed"

log = structlog.get_logger(__name__)

_file_option = click.option(
    "-f",
    "--file",
    "path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Catalog JSON file (default: [errors] path from config).",
)


@click.group(
    cls=RepokitGroup,
    examples="""\
  repokit errors lookup entity_not_found --file errors.json
  repokit errors check --file errors.json""",
)
def errors() -> None:
    """Inspect error descriptor catalogs."""


def _load(app: AppContext, path: str | None) -> tuple[ErrorCatalog | None, OperationResult[Any]]:
    from repokit.api.catalog import ErrorCatalogError
    from repokit.services.result import OperationResult

    try:
        catalog = app.catalog(path)
    except (FileNotFoundError, ErrorCatalogError) as exc:
        return None, OperationResult.from_exception(exc, CATALOG_LOAD_FAILED)
    return catalog, OperationResult.success(None)


@errors.command(
    examples="""\
  repokit errors lookup entity_not_found
  repokit --json errors lookup entity_not_found entities_not_found -f errors.json""",
)
@click.argument("keys", nargs=-1, required=True)
@_file_option
@click.pass_obj
def lookup(app: AppContext, keys: tuple[str, ...], path: str | None) -> None:
    """Show the descriptors for KEYS (unknown keys map to the fallback)."""
    from repokit.services.result import OperationResult

    catalog, loaded = _load(app, path)
    if catalog is None:
        app.emit(loaded, "lookup")
        return

    found = {key: catalog.get(key).model_dump(exclude_none=True) for key in keys}
    unknown = [key for key in keys if key not in catalog]
    app.emit(OperationResult.success({"errors": found, "unknown": unknown}), "lookup")


@errors.command(
    examples="""\
  repokit errors check
  repokit errors check --file config/errors.json""",
)
@_file_option
@click.pass_obj
def check(app: AppContext, path: str | None) -> None:
    """Validate a catalog file and list its keys."""
    from repokit.config.logging import log_timer
    from repokit.services.result import OperationResult

    with log_timer(log, "catalog check", path=path) as extra:
        catalog, loaded = _load(app, path)
        extra["ok"] = catalog is not None
    if catalog is None:
        app.emit(loaded, "check")
        return
    data = {"path": str(catalog.path), "count": len(catalog), "keys": sorted(catalog.keys())}
    app.emit(OperationResult.success(data), "check")
