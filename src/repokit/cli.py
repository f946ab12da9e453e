"""``repokit`` entry point: global flags, settings resolution, subcommands."""

from __future__ import annotations

import click
from pydantic import ValidationError

from repokit import __version__
from repokit.commands import register_commands
from repokit.commands._context import AppContext
from repokit.config.discovery import ConfigError
from repokit.config.settings import RepokitSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="repokit")
@click.option("--json", "json_output", is_flag=True, help="Emit the JSON response envelope.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and exception details.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this repokit.toml instead of discovering one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Result-typed repository toolkit."""
    try:
        settings = RepokitSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
        )
    except (ConfigError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc

    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
