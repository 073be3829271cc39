"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from folio.models.account import AccountRole
from folio.services._shared.errors import (
    AccountNotFoundError,
    ConflictError,
    PasswordPolicyError,
)
from folio.services.identity.dto import SignupIn
from folio.services.identity.service import AccountService

LOGGER = logging.getLogger(__name__)


@click.group("accounts")
def accounts_cli() -> None:
    """Account administration commands."""


@accounts_cli.command("create-admin")
@click.option("--login-id", required=True, help="Login handle of the new admin.")
@click.option("--email", required=True, help="Email address of the new admin.")
@click.option("--nickname", default=None, help="Display name (defaults to the login handle).")
@click.password_option("--password", help="Password; prompted when omitted.")
@with_appcontext
def create_admin(login_id: str, email: str, nickname: str | None, password: str) -> None:
    """Create an account with the ADMIN role."""
    try:
        account = AccountService().signup(
            SignupIn(
                login_id=login_id,
                email=email,
                password=password,
                nickname=nickname,
                role=AccountRole.ADMIN.value,
            )
        )
    except (ConflictError, PasswordPolicyError) as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("Admin account %s created from the CLI", account.id)
    click.echo(f"Created admin '{account.login_id}' (id={account.id}).")


@accounts_cli.command("revoke-sessions")
@click.argument("login_id")
@with_appcontext
def revoke_sessions(login_id: str) -> None:
    """Invalidate the stored refresh token of LOGIN_ID."""
    try:
        AccountService().revoke_sessions(login_id)
    except AccountNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Refresh session cleared for '{login_id}'.")
