"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy error catalog loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from repokit.output.formatters import format_result

if TYPE_CHECKING:
    from repokit.api.catalog import ErrorCatalog
    from repokit.config.settings import RepokitSettings
    from repokit.services.result import OperationResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: RepokitSettings) -> None:
        self.settings = settings

        from repokit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def catalog(self, path: str | Path | None = None) -> ErrorCatalog:
        """Load the error catalog from *path* or the configured location.

        Raises:
            click.UsageError: No catalog path given or configured.
        """
        from repokit.api.catalog import ErrorCatalog

        target = Path(path) if path is not None else self.settings.errors_path
        if target is None:
            raise click.UsageError("No error catalog configured; pass --file or set [errors] path.")
        return ErrorCatalog(target)

    def emit(self, result: OperationResult[Any], op: str) -> None:
        """Format and output a result with correct exit semantics.

        * Success: writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            op,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.is_success:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
