"""Token issuer: builds access/refresh claim sets and signs them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from folio.services._shared.ports.credential_codec import (
    CredentialCodec,
    CredentialError,
    ExpiredCredential,
    MalformedCredential,
)
from folio.services.auth.dto import AuthTokenConfig, ClaimSet

if TYPE_CHECKING:
    from folio.models.account import Account

log = logging.getLogger(__name__)


class TokenIssuer:
    """
    Mint and inspect access/refresh tokens.

    Stateless apart from the injected codec and lifetimes; it never touches
    persistence. ``validate`` and ``payload`` swallow codec failures (logged),
    ``decode`` lets them propagate.
    """

    def __init__(self, codec: CredentialCodec, cfg: AuthTokenConfig | None = None) -> None:
        self.codec = codec
        self.cfg = cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Issuing
    # ------------------------------------------------------------------ #

    def issue_access(self, account: Account) -> str:
        claims: dict[str, Any] = {
            "accountId": account.id,
            "email": account.email,
            "displayName": account.nickname,
            "role": _role_value(account.role),
            "jti": uuid4().hex,
        }
        return self.codec.encode(claims, self.cfg.access_expires)

    def issue_refresh(self, account: Account) -> str:
        claims: dict[str, Any] = {
            "accountId": account.id,
            "email": account.email,
            "jti": uuid4().hex,
        }
        return self.codec.encode(claims, self.cfg.refresh_expires)

    # ------------------------------------------------------------------ #
    # Inspection
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> ClaimSet:
        """
        Decode ``token`` into a :class:`ClaimSet`.

        :raises CredentialError: On any codec failure, or
            :class:`MalformedCredential` when required claims are absent.
        """
        payload = self.codec.decode(token)
        try:
            return ClaimSet.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedCredential(str(exc)) from exc

    def payload(self, token: str) -> ClaimSet | None:
        """Best-effort decode; ``None`` on any failure."""
        try:
            return self.decode(token)
        except ExpiredCredential:
            log.debug("Token expired")
            return None
        except CredentialError as exc:
            log.warning("Token rejected: %s", exc.__class__.__name__)
            return None

    def validate(self, token: str) -> bool:
        return self.payload(token) is not None


def _role_value(role: Any) -> str:
    return str(getattr(role, "value", role))
