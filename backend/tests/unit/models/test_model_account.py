# tests/unit/models/test_model_account.py
from __future__ import annotations

import pytest
from folio.models.account import Account, AccountRole
from sqlalchemy.exc import IntegrityError

from tests.factories.account import DEFAULT_PASSWORD, AccountFactory


class TestAccountModel:
    def test_email_is_normalized(self, session):
        account = AccountFactory(email="  Mixed@Example.COM ")
        session.flush()

        assert account.email == "mixed@example.com"

    @pytest.mark.parametrize("bad", ["", "no-at-sign", "user@nodot"])
    def test_email_validation(self, bad):
        with pytest.raises(ValueError):
            Account(email=bad)

    def test_login_id_and_nickname_are_required(self):
        with pytest.raises(ValueError):
            Account(login_id="   ")
        with pytest.raises(ValueError):
            Account(nickname="")

    def test_password_is_write_only(self, session):
        account = AccountFactory()
        session.flush()

        with pytest.raises(AttributeError):
            _ = account.password
        assert account.password_hash != DEFAULT_PASSWORD
        assert account.verify_password(DEFAULT_PASSWORD)
        assert not account.verify_password("something-else")

    def test_empty_password_is_rejected(self):
        with pytest.raises(ValueError):
            Account().password = ""

    def test_role_defaults_to_user(self, session):
        account = Account(
            login_id="plain", email="plain@example.com", nickname="Plain", password="Pl4in!pass"
        )
        session.add(account)
        session.flush()

        assert account.role is AccountRole.USER
        assert account.role.is_admin is False
        assert account.refresh_token is None

    def test_email_is_unique(self, session):
        AccountFactory(email="same@example.com")
        session.flush()

        with pytest.raises(IntegrityError):
            AccountFactory(email="same@example.com")

    def test_repr_shows_id_and_login_id(self, session):
        account = AccountFactory(login_id="reprme")
        session.flush()

        assert repr(account) == f"<Account id={account.id!r} login_id='reprme'>"
