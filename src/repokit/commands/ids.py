"""Command group: entity id generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from repokit.commands._base import RepokitGroup

if TYPE_CHECKING:
    from repokit.commands._context import AppContext


@click.group(
    "id",
    cls=RepokitGroup,
    examples="""\
  repokit id generate Order
  repokit id generate Order --prefix ORDX --count 3
  repokit --json id generate Invoice --no-entropy""",
)
def ids() -> None:
    """Generate sortable entity ids."""


@ids.command(
    examples="""\
  repokit id generate Customer
  repokit id generate Customer --count 5""",
)
@click.argument("type_name")
@click.option("--prefix", default=None, help="Custom prefix instead of the type-derived one.")
@click.option(
    "-n",
    "--count",
    type=click.IntRange(min=1, max=1000),
    default=1,
    help="Number of ids to generate.",
)
@click.option("--no-entropy", is_flag=True, help="Omit the random suffix.")
@click.pass_obj
def generate(
    app: AppContext,
    type_name: str,
    prefix: str | None,
    count: int,
    no_entropy: bool,
) -> None:
    """Generate ids for entities of TYPE_NAME."""
    from repokit.domain.ids import generate_id
    from repokit.services.result import OperationResult

    entropy = app.settings.ids.entropy and not no_entropy
    generated = [generate_id(type_name, prefix, entropy=entropy) for _ in range(count)]
    app.emit(OperationResult.success({"type": type_name, "ids": generated}), "generate_id")
