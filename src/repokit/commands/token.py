"""Command group: JWT issuance and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from repokit.commands._base import RepokitGroup

if TYPE_CHECKING:
    from repokit.commands._context import AppContext


@click.group(
    cls=RepokitGroup,
    examples="""\
  REPOKIT_JWT__SECRET_KEY=... repokit token create 42 --email a@b.io --role admin
  repokit --json token validate eyJhbGciOi...""",
)
def token() -> None:
    """Issue and validate JWTs signed with the [jwt] settings."""


@token.command("create")
@click.argument("user_id")
@click.option("--email", required=True, help="Value of the unique_name claim.")
@click.option("--role", default="user", show_default=True)
@click.pass_obj
def create_cmd(app: AppContext, user_id: str, email: str, role: str) -> None:
    """Issue a token for USER_ID."""
    from repokit.security.jwt import create_user_token
    from repokit.services.result import OperationResult

    try:
        issued = create_user_token(user_id, email, role, app.settings.jwt)
    except ValueError as exc:
        raise click.UsageError(f"{exc}; set the [jwt] section.") from exc
    app.emit(OperationResult.success(issued.model_dump(mode="json")), "create_token")


@token.command("validate")
@click.argument("encoded")
@click.pass_obj
def validate_cmd(app: AppContext, encoded: str) -> None:
    """Verify ENCODED and print its claims. Exits 1 when rejected."""
    from repokit.security.jwt import validate_token

    try:
        result = validate_token(encoded, app.settings.jwt)
    except ValueError as exc:
        raise click.UsageError(f"{exc}; set the [jwt] section.") from exc
    app.emit(result, "validate_token")
