"""Click command classes that carry usage examples.

``--help`` stays short; ``--examples`` prints the examples block given at
declaration time and exits::

    @errors.command(examples="  repokit errors check --file errors.json")
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class ExamplesMixin:
    """Adds an eager ``--examples`` flag when an ``examples`` text is given."""

    examples: str | None

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None
        if self.examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(textwrap.indent(self.examples or "", "  "))
        ctx.exit(0)


class RepokitCommand(ExamplesMixin, click.Command):
    """Leaf command with ``--examples`` support."""


class RepokitGroup(ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`RepokitCommand`."""

    command_class = RepokitCommand
