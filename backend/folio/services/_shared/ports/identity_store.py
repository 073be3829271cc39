from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from folio.models.account import Account


class IdentityStore(Protocol):
    """
    Account persistence as seen by the authentication flow.

    Each account holds at most one current refresh token. Lookups by refresh
    token are exact matches on that slot.
    """

    def get(self, entity_id: int) -> Account | None: ...

    def get_by_handle_or_email(self, identifier: str) -> Account | None: ...

    def get_by_refresh_token(self, token: str) -> Account | None: ...

    def store_refresh_token(self, account: Account, token: str | None) -> None:
        """Overwrite the refresh slot unconditionally (``None`` clears it)."""

    def swap_refresh_token(self, account_id: int, *, expected: str, replacement: str) -> bool:
        """
        Replace the refresh slot only while it still equals ``expected``.

        :returns: ``True`` when the row changed, ``False`` when another writer
            rotated or cleared the slot first.
        """
