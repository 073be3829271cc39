"""
AccountService
==============

Application service for the ``Account`` aggregate:
- Signup with uniqueness checks and the password policy
- Profile retrieval and admin listing
- Password lifecycle (which also ends every refresh session)
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from folio.models.account import Account, AccountRole
from folio.repositories.account import AccountRepository
from folio.services._shared.base import BaseService
from folio.services._shared.dto import PageMeta, PaginationIn
from folio.services._shared.errors import (
    AccountNotFoundError,
    ConflictError,
    PasswordPolicyError,
    ServiceError,
    violates,
)
from folio.services._shared.policies.password import password_problems
from folio.services.identity.dto import (
    AccountOut,
    AccountPageOut,
    PasswordChangeIn,
    SignupIn,
)

log = logging.getLogger(__name__)


class AccountService(BaseService):
    """
    Application service for the ``Account`` aggregate.

    Never issues tokens; see :class:`folio.services.auth.service.AuthService`.
    """

    # --------------------------------------------------------------------- #
    # Signup
    # --------------------------------------------------------------------- #

    def signup(self, dto: SignupIn) -> AccountOut:
        """
        Create a new account.

        :param dto: Signup input DTO.
        :type dto: SignupIn
        :returns: Public-safe account DTO.
        :rtype: AccountOut
        :raises PasswordPolicyError: If the password is too weak.
        :raises ConflictError: If the login handle or email is taken.
        """
        problems = password_problems(dto.password)
        if problems:
            raise PasswordPolicyError(" ".join(problems))

        login_id = dto.login_id.strip()
        nickname = (dto.nickname or "").strip() or login_id

        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts

            if repo.exists_by_login_id(login_id):
                raise ConflictError("Account", "login id already in use")
            if repo.exists_by_email(dto.email):
                raise ConflictError("Account", "email already in use")

            try:
                account = repo.add(
                    Account(
                        login_id=login_id,
                        email=dto.email,
                        password=dto.password,  # model hashes via setter
                        nickname=nickname,
                        role=AccountRole(dto.role),
                        image_url=dto.image_url,
                        bio=dto.bio if dto.bio is not None else f"{nickname}'s profile",
                    )
                )
            except IntegrityError as exc:
                if violates(exc, "uq_accounts_email"):
                    raise ConflictError("Account", "email already in use") from exc
                if violates(exc, "uq_accounts_login_id"):
                    raise ConflictError("Account", "login id already in use") from exc
                raise

            out = self._to_out(account)

        log.info("Account %s created", out.id)
        return out

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_account(self, account_id: int) -> AccountOut:
        """
        Retrieve an account by identifier.

        :raises AccountNotFoundError: If the account does not exist.
        """
        out = self.find_account(account_id)
        if out is None:
            raise AccountNotFoundError(account_id)
        return out

    def find_account(self, account_id: int) -> AccountOut | None:
        with self.ro_uow() as uow:
            account = uow.accounts.get(account_id)
            return self._to_out(account) if account is not None else None

    def is_email_taken(self, email: str) -> bool:
        with self.ro_uow() as uow:
            return uow.accounts.exists_by_email(email)

    def is_login_id_taken(self, login_id: str) -> bool:
        with self.ro_uow() as uow:
            return uow.accounts.exists_by_login_id(login_id)

    def list_accounts(self, dto: PaginationIn) -> AccountPageOut:
        """
        Return one page of accounts, newest first unless ``dto.sort`` says otherwise.

        :param dto: Pagination input.
        :returns: Items and page metadata.
        :rtype: AccountPageOut
        """
        pagination = self.ensure_pagination(
            page=dto.page, limit=dto.limit, sort=dto.sort or ["-created_at"]
        )
        with self.ro_uow() as uow:
            page = uow.accounts.paginate(pagination)
            items = [self._to_out(a) for a in page.items]
        return AccountPageOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    # --------------------------------------------------------------------- #
    # Password management and sessions
    # --------------------------------------------------------------------- #

    def change_password(self, dto: PasswordChangeIn) -> None:
        """
        Change an account's password after verifying the current one.

        The stored refresh token is cleared, so every other session has to
        sign in again once its access token expires.

        :raises AccountNotFoundError: When the account is missing.
        :raises ServiceError: When the current password does not match.
        :raises PasswordPolicyError: When the new password is too weak.
        """
        problems = password_problems(dto.new_password)
        if problems:
            raise PasswordPolicyError(" ".join(problems))

        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.get(dto.account_id)
            if account is None:
                raise AccountNotFoundError(dto.account_id)
            if not account.verify_password(dto.current_password):
                raise ServiceError("Current password is incorrect.")

            repo.update_password(account, dto.new_password)
            repo.store_refresh_token(account, None)

        log.info("Password changed for account %s", dto.account_id)

    def revoke_sessions(self, login_id: str) -> None:
        """
        Clear the stored refresh token of the account with ``login_id``.

        :raises AccountNotFoundError: If no account uses that handle.
        """
        with self.rw_uow() as uow:
            repo: AccountRepository = uow.accounts
            account = repo.get_by_login_id(login_id)
            if account is None:
                raise AccountNotFoundError(login_id)
            repo.store_refresh_token(account, None)

        log.info("Refresh session revoked for %s", login_id)

    # --------------------------------------------------------------------- #
    # Mapping
    # --------------------------------------------------------------------- #

    @staticmethod
    def _to_out(account: Account) -> AccountOut:
        return AccountOut(
            id=account.id,
            login_id=account.login_id,
            email=account.email,
            nickname=account.nickname,
            role=account.role.value,
            image_url=account.image_url,
            bio=account.bio,
            created_at=account.created_at,
        )
