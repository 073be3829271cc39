# tests/unit/test_cli.py
from __future__ import annotations

from folio.models.account import Account, AccountRole

from tests.factories.account import AccountFactory


class TestAccountsCLI:
    def test_create_admin(self, app, session):
        runner = app.test_cli_runner()

        result = runner.invoke(
            args=[
                "accounts",
                "create-admin",
                "--login-id",
                "root_admin",
                "--email",
                "root@example.com",
                "--password",
                "Adm1n!password",
            ]
        )

        assert result.exit_code == 0, result.output
        assert "Created admin 'root_admin'" in result.output
        stored = session.query(Account).filter_by(login_id="root_admin").one()
        assert stored.role is AccountRole.ADMIN
        assert stored.nickname == "root_admin"

    def test_create_admin_reports_conflicts(self, app, session):
        AccountFactory(login_id="root_admin")
        session.commit()

        result = app.test_cli_runner().invoke(
            args=[
                "accounts",
                "create-admin",
                "--login-id",
                "root_admin",
                "--email",
                "other@example.com",
                "--password",
                "Adm1n!password",
            ]
        )

        assert result.exit_code != 0
        assert "login id already in use" in result.output

    def test_revoke_sessions(self, app, session):
        account = AccountFactory(login_id="revoked", refresh_token="stored")
        session.commit()
        account_id = account.id

        result = app.test_cli_runner().invoke(args=["accounts", "revoke-sessions", "revoked"])

        assert result.exit_code == 0, result.output
        session.expire_all()
        assert session.get(Account, account_id).refresh_token is None

    def test_revoke_sessions_unknown_account(self, app, session):
        result = app.test_cli_runner().invoke(args=["accounts", "revoke-sessions", "ghost"])

        assert result.exit_code != 0
        assert "Account not found: ghost" in result.output
