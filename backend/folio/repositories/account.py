"""Account repository: lookups and the refresh-token slot."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from folio.models.account import Account
from folio.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Persistence-only repository for :class:`Account`.

    Implements :class:`folio.services._shared.ports.IdentityStore`. It never
    signs or decodes tokens; it only stores the current refresh value.
    """

    model = Account

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "id": Account.id,
            "login_id": Account.login_id,
            "email": Account.email,
            "nickname": Account.nickname,
            "created_at": Account.created_at,
        }

    def _filterable_fields(self):
        return {
            "login_id": Account.login_id,
            "email": Account.email,
            "role": Account.role,
        }

    def _updatable_fields(self):
        """Profile fields editable by the owner (not password or role)."""
        return {"nickname", "image_url", "bio"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> Account | None:
        """Fetch an account by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: Account or ``None`` when not found.
        :rtype: Account | None
        """
        stmt = select(Account).where(Account.email == email.strip().lower())
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def get_by_login_id(self, login_id: str) -> Account | None:
        """Fetch an account by its exact login handle."""
        stmt = select(Account).where(Account.login_id == login_id.strip())
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def get_by_handle_or_email(self, identifier: str) -> Account | None:
        """Resolve a login identifier: an ``@`` means email, anything else a handle."""
        if "@" in identifier:
            return self.get_by_email(identifier)
        return self.get_by_login_id(identifier)

    def exists_by_email(self, email: str) -> bool:
        return self.exists(email=email.strip().lower())

    def exists_by_login_id(self, login_id: str) -> bool:
        return self.exists(login_id=login_id.strip())

    # ---------------------------- Refresh slot ----------------------------

    def get_by_refresh_token(self, token: str) -> Account | None:
        """Return the account whose stored refresh token equals ``token`` exactly."""
        if not token:
            return None
        stmt = select(Account).where(Account.refresh_token == token)
        return cast(Account | None, self.session.execute(stmt).scalars().first())

    def store_refresh_token(self, account: Account, token: str | None) -> None:
        """Overwrite the refresh slot unconditionally and flush."""
        account.refresh_token = token
        self.flush()

    def swap_refresh_token(self, account_id: int, *, expected: str, replacement: str) -> bool:
        """Conditionally rotate the refresh slot with a single ``UPDATE``.

        The row changes only while it still holds ``expected``, so of two
        concurrent rotations of the same token exactly one wins.

        :returns: ``True`` when the row was updated.
        :rtype: bool
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.refresh_token == expected)
            .values(refresh_token=replacement)
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def clear_refresh_token(self, account_id: int) -> bool:
        """Clear the refresh slot by id; ``True`` when an account was found."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(refresh_token=None)
            .execution_options(synchronize_session="evaluate")
        )
        return bool(self.session.execute(stmt).rowcount)

    # ---------------------------- Password ops ----------------------------

    def update_password(self, account: Account, new_password: str) -> None:
        """Hash and assign a new password, then flush."""
        account.password = new_password  # invokes setter → hash
        self.flush()
