"""Subcommand modules for repokit.

Provides register_commands() which uses deferred imports to keep
``repokit --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from repokit.commands.db import db
    from repokit.commands.errors import errors
    from repokit.commands.ids import ids
    from repokit.commands.password import password
    from repokit.commands.token import token

    cli.add_command(ids)
    cli.add_command(errors)
    cli.add_command(password)
    cli.add_command(token)
    cli.add_command(db)
