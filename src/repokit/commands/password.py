"""Command group: password hashing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from repokit.commands._base import RepokitGroup

if TYPE_CHECKING:
    from repokit.commands._context import AppContext

PASSWORD_MISMATCH = "password_mismatch"


@click.group(
    cls=RepokitGroup,
    examples="""\
  repokit password hash
  repokit password verify 'c2FsdA==.aGFzaA=='""",
)
def password() -> None:
    """Hash and verify passwords."""


@password.command("hash")
@click.option("--password", "plain", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def hash_cmd(app: AppContext, plain: str) -> None:
    """Print the PBKDF2 hash of a password."""
    from repokit.security.password import hash_password
    from repokit.services.result import OperationResult

    hashed = hash_password(plain, iterations=app.settings.security.pbkdf2_iterations)
    app.emit(OperationResult.success({"hash": hashed}), "hash_password")


@password.command("verify")
@click.argument("hashed")
@click.option("--password", "plain", prompt=True, hide_input=True)
@click.pass_obj
def verify_cmd(app: AppContext, hashed: str, plain: str) -> None:
    """Check a password against HASHED. Exits 1 on mismatch."""
    from repokit.security.password import verify_password
    from repokit.services.result import OperationResult

    if verify_password(hashed, plain, iterations=app.settings.security.pbkdf2_iterations):
        app.emit(OperationResult.success({"match": True}), "verify_password")
    else:
        app.emit(
            OperationResult.failure("Password does not match.", PASSWORD_MISMATCH),
            "verify_password",
        )
