# folio/infra/jwt/credential_codec.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from folio.services._shared.ports.credential_codec import (
    CredentialCodec,
    ExpiredCredential,
    InvalidSignature,
    MalformedCredential,
)

REQUIRED_CLAIMS = ("exp", "iat")


@dataclass(frozen=True, slots=True)
class JWTCredentialCodec(CredentialCodec):
    """
    HMAC-signed JWT codec built on PyJWT.

    The secret is handed in at construction (see :mod:`folio.core.security`);
    nothing is read from the Flask config at call time, so instances are
    usable outside an application context.

    :param secret: Symmetric signing key.
    :param algorithm: HMAC algorithm, ``HS256`` by default.
    :param leeway: Clock skew tolerated when checking ``exp``.
    """

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    leeway: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("JWT secret must be a non-empty string.")
        if not self.algorithm.upper().startswith("HS"):
            raise ValueError(f"Unsupported signing algorithm: {self.algorithm}")

    def encode(self, claims: Mapping[str, Any], expires_in: timedelta) -> str:
        """
        Sign ``claims`` adding ``iat`` (now) and ``exp`` (now + ``expires_in``).

        :returns: Compact JWS string.
        :rtype: str
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + expires_in
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry, then return the claims.

        :raises ExpiredCredential: Signature valid but ``exp`` has passed.
        :raises InvalidSignature: Signed with another key.
        :raises MalformedCredential: Anything else that is not a valid token.
        """
        if not isinstance(token, str) or not token:
            raise MalformedCredential("Empty credential.")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredCredential("Credential has expired.") from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature("Credential signature is invalid.") from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedCredential(f"Credential is malformed: {exc}") from exc
