# folio/services/auth/service.py
from __future__ import annotations

import logging
from functools import lru_cache

from werkzeug.security import check_password_hash, generate_password_hash

from folio.services._shared.base import BaseService, ServiceContext
from folio.services._shared.errors import (
    AccountNotFoundError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from folio.services._shared.ports import IdentityStore
from folio.services._shared.ports.credential_codec import CredentialError
from folio.services.auth.dto import ClaimSet, LoginIn, RefreshIn, TokenPairOut
from folio.services.auth.tokens import TokenIssuer

log = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return generate_password_hash("folio-unknown-account")


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Access tokens are stateless. Each account stores exactly one refresh
    token: login overwrites it, refresh rotates it with a conditional update
    and logout clears it. A refresh token is honored only while it equals the
    stored value.
    """

    def __init__(self, *, issuer: TokenIssuer, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the service with its dependencies.

        :param issuer: Token issuer wrapping the application's codec.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.issuer = issuer

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input (email or login handle plus password).
        :returns: Access/refresh token pair.
        :raises InvalidCredentialsError: Unknown identifier or wrong password.
        """
        with self.rw_uow() as uow:
            repo: IdentityStore = uow.accounts
            account = repo.get_by_handle_or_email(dto.identifier.strip())
            if account is None:
                # Same hashing cost as a real check so unknown ids are not cheaper
                check_password_hash(_dummy_password_hash(), dto.password)
                log.info("Login rejected", extra={"outcome": "unknown_identifier"})
                raise InvalidCredentialsError()
            if not account.verify_password(dto.password):
                log.info("Login rejected", extra={"outcome": "bad_password"})
                raise InvalidCredentialsError()

            access = self.issuer.issue_access(account)
            refresh = self.issuer.issue_refresh(account)
            repo.store_refresh_token(account, refresh)
            account_id = account.id

        log.info("Login succeeded for account %s", account_id, extra={"outcome": "login"})
        return TokenPairOut(account_id=account_id, access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        :param dto: Refresh input.
        :returns: New access/refresh pair; the old refresh token stops working.
        :raises InvalidTokenError: Token undecodable, not the stored value,
            owned by another account, or rotated concurrently.
        """
        try:
            claims = self.issuer.decode(dto.refresh_token)
        except CredentialError as exc:
            log.info("Refresh rejected: %s", exc.__class__.__name__, extra={"outcome": "decode"})
            raise InvalidTokenError() from exc

        with self.rw_uow() as uow:
            repo: IdentityStore = uow.accounts
            account = repo.get_by_refresh_token(dto.refresh_token)
            if account is None:
                log.info("Refresh rejected", extra={"outcome": "not_current"})
                raise InvalidTokenError()
            if account.id != claims.account_id:
                log.warning(
                    "Refresh token claims account %s but is stored on %s",
                    claims.account_id,
                    account.id,
                )
                raise InvalidTokenError()

            access = self.issuer.issue_access(account)
            refresh = self.issuer.issue_refresh(account)
            if not repo.swap_refresh_token(
                account.id, expected=dto.refresh_token, replacement=refresh
            ):
                log.info("Refresh lost a concurrent rotation", extra={"outcome": "race"})
                raise InvalidTokenError()
            account_id = account.id

        log.info("Refresh rotated for account %s", account_id, extra={"outcome": "refresh"})
        return TokenPairOut(account_id=account_id, access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, account_id: int) -> None:
        """
        Clear the stored refresh token so it can no longer be exchanged.

        Access tokens already issued stay valid until they expire.

        :raises AccountNotFoundError: If the account does not exist.
        """
        with self.rw_uow() as uow:
            repo: IdentityStore = uow.accounts
            account = repo.get(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            repo.store_refresh_token(account, None)
        log.info("Logout for account %s", account_id, extra={"outcome": "logout"})

    # ------------------------------------------------------------------ #
    # Access token resolution
    # ------------------------------------------------------------------ #

    def resolve_identity(self, access_token: str) -> ClaimSet | None:
        """Return the identity in ``access_token``, or ``None`` when it is unusable."""
        claims = self.issuer.payload(access_token)
        if claims is None or not claims.role:
            return None
        return claims
