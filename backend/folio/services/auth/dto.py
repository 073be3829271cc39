"""Value objects exchanged with the auth service."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any


@dataclass(frozen=True, slots=True)
class LoginIn:
    """``identifier`` is an email when it contains ``@``, otherwise a login id."""

    identifier: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    refresh_token: str


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """Freshly issued credentials for ``account_id``."""

    account_id: int
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class ClaimSet:
    """
    Decoded token claims.

    Access tokens carry every field; refresh tokens leave ``display_name``
    and ``role`` empty.

    :param account_id: ``accountId`` claim.
    :param email: ``email`` claim.
    :param display_name: ``displayName`` claim.
    :param role: ``role`` claim (``"USER"`` or ``"ADMIN"``).
    :param jti: Unique token id.
    :param issued_at: ``iat`` as an aware UTC datetime.
    :param expires_at: ``exp`` as an aware UTC datetime.
    """

    account_id: int
    email: str
    display_name: str | None
    role: str | None
    jti: str | None
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ClaimSet:
        """
        Build from a decoded JWT payload.

        :raises ValueError: If ``accountId`` or ``email`` are missing or invalid.
        """
        raw_id = payload.get("accountId")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int | str):
            raise ValueError("accountId claim is missing.")
        try:
            account_id = int(raw_id)
        except ValueError as exc:
            raise ValueError("accountId claim is not an integer.") from exc
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise ValueError("email claim is missing.")
        return cls(
            account_id=account_id,
            email=email,
            display_name=payload.get("displayName"),
            role=payload.get("role"),
            jti=payload.get("jti"),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """Lifetimes of newly issued tokens."""

    access_expires: timedelta = timedelta(hours=1)
    refresh_expires: timedelta = timedelta(days=7)

    @classmethod
    def from_seconds(cls, access: int, refresh: int) -> AuthTokenConfig:
        return cls(
            access_expires=timedelta(seconds=access),
            refresh_expires=timedelta(seconds=refresh),
        )
