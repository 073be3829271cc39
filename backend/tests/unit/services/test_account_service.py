# tests/unit/services/test_account_service.py
from __future__ import annotations

import pytest
from folio.models.account import Account
from folio.repositories.account import AccountRepository
from folio.services._shared.dto import PaginationIn
from folio.services._shared.errors import (
    AccountNotFoundError,
    ConflictError,
    PasswordPolicyError,
    ServiceError,
)
from folio.services.identity.dto import PasswordChangeIn, SignupIn
from folio.services.identity.service import AccountService

from tests.factories.account import DEFAULT_PASSWORD, AccountFactory


class TestAccountService:
    """Validate AccountService behaviours for the Account aggregate."""

    @pytest.fixture()
    def service(self) -> AccountService:
        return AccountService()

    @pytest.fixture()
    def repo(self, session) -> AccountRepository:
        return AccountRepository(session=session)

    # --------------------------------------------------------------------- #
    # Signup
    # --------------------------------------------------------------------- #

    def test_signup_creates_account_with_defaults(self, service, repo):
        result = service.signup(
            SignupIn(login_id="newbie", email="New@Example.com", password="Sup3r!secret")
        )

        assert result.login_id == "newbie"
        assert result.email == "new@example.com"
        assert result.nickname == "newbie"
        assert result.bio == "newbie's profile"
        assert result.role == "USER"

        stored = repo.get_by_email("new@example.com")
        assert stored is not None
        assert stored.verify_password("Sup3r!secret")
        assert stored.refresh_token is None

    def test_signup_keeps_explicit_profile(self, service, faker):
        email = faker.unique.email().lower()
        result = service.signup(
            SignupIn(
                login_id="painter",
                email=email,
                password="Sup3r!secret",
                nickname="Frida",
                bio="Colours",
                image_url="https://cdn.example.com/frida.png",
            )
        )

        assert result.nickname == "Frida"
        assert result.bio == "Colours"
        assert result.image_url == "https://cdn.example.com/frida.png"
        assert result.email == email

    def test_signup_rejects_taken_login_id(self, service, session):
        AccountFactory(login_id="taken")
        session.commit()

        with pytest.raises(ConflictError, match="login id"):
            service.signup(
                SignupIn(login_id="taken", email="fresh@example.com", password="Sup3r!secret")
            )

    def test_signup_rejects_taken_email(self, service, session):
        AccountFactory(email="dup@example.com")
        session.commit()

        with pytest.raises(ConflictError, match="email"):
            service.signup(
                SignupIn(login_id="fresh", email="DUP@example.com", password="Sup3r!secret")
            )

    @pytest.mark.parametrize("weak", ["short1!", "onlyletterslong", "1234567890123"])
    def test_signup_enforces_password_policy(self, service, repo, weak):
        with pytest.raises(PasswordPolicyError):
            service.signup(SignupIn(login_id="weakling", email="weak@example.com", password=weak))

        assert repo.get_by_login_id("weakling") is None

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def test_get_account_and_missing_account(self, service, session):
        account = AccountFactory()
        session.commit()

        assert service.get_account(account.id).login_id == account.login_id
        assert service.find_account(account.id + 1000) is None
        with pytest.raises(AccountNotFoundError):
            service.get_account(account.id + 1000)

    def test_availability_checks(self, service, session):
        AccountFactory(login_id="someone", email="someone@example.com")
        session.commit()

        assert service.is_email_taken("SOMEONE@example.com") is True
        assert service.is_email_taken("nobody@example.com") is False
        assert service.is_login_id_taken("someone") is True
        assert service.is_login_id_taken("nobody") is False

    def test_list_accounts_paginates(self, service, session):
        for handle in ("carol", "alice", "bob"):
            AccountFactory(login_id=handle)
        session.commit()

        page = service.list_accounts(PaginationIn(page=1, limit=2, sort=["login_id"]))

        assert [a.login_id for a in page.items] == ["alice", "bob"]
        assert page.meta.total == 3
        assert page.meta.has_next is True
        assert page.meta.has_prev is False

    # --------------------------------------------------------------------- #
    # Password and sessions
    # --------------------------------------------------------------------- #

    def test_change_password_clears_refresh_slot(self, service, session):
        account = AccountFactory(refresh_token="stored-refresh-token")
        session.commit()

        service.change_password(
            PasswordChangeIn(
                account_id=account.id,
                current_password=DEFAULT_PASSWORD,
                new_password="N3w!password",
            )
        )

        session.expire_all()
        stored = session.get(Account, account.id)
        assert stored.refresh_token is None
        assert stored.verify_password("N3w!password")
        assert not stored.verify_password(DEFAULT_PASSWORD)

    def test_change_password_requires_current_password(self, service, session):
        account = AccountFactory()
        session.commit()

        with pytest.raises(ServiceError, match="Current password"):
            service.change_password(
                PasswordChangeIn(
                    account_id=account.id,
                    current_password="not-the-password",
                    new_password="N3w!password",
                )
            )

    def test_change_password_for_missing_account(self, service):
        with pytest.raises(AccountNotFoundError):
            service.change_password(
                PasswordChangeIn(
                    account_id=424242,
                    current_password=DEFAULT_PASSWORD,
                    new_password="N3w!password",
                )
            )

    def test_revoke_sessions(self, service, session):
        account = AccountFactory(login_id="revokee", refresh_token="stored-refresh-token")
        session.commit()

        service.revoke_sessions("revokee")

        session.expire_all()
        assert session.get(Account, account.id).refresh_token is None
        with pytest.raises(AccountNotFoundError):
            service.revoke_sessions("nobody")
