"""Credential codec and token issuer wiring.

One codec and one issuer are built per application from its configuration
and stored under ``app.extensions``; request code reaches them through the
accessors below instead of reading secrets itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, current_app

from folio.core.config import PLACEHOLDER_JWT_SECRET
from folio.infra.jwt.credential_codec import JWTCredentialCodec
from folio.services._shared.base import ServiceContext
from folio.services.auth.dto import AuthTokenConfig
from folio.services.auth.service import AuthService
from folio.services.auth.tokens import TokenIssuer

log = logging.getLogger(__name__)

EXTENSION_KEY = "folio.security"


@dataclass(frozen=True, slots=True)
class SecurityState:
    """Immutable per-app security collaborators."""

    codec: JWTCredentialCodec
    issuer: TokenIssuer
    token_cfg: AuthTokenConfig


def init_app(app: Flask) -> None:
    """Build the codec and issuer from ``JWT_*`` and ``*_TOKEN_EXPIRES_SECONDS``.

    :raises RuntimeError: When ``REQUIRE_STRONG_SECRETS`` is set and the JWT
        secret is missing or still the shipped placeholder.
    """
    secret = app.config.get("JWT_SECRET_KEY") or ""
    if app.config.get("REQUIRE_STRONG_SECRETS") and secret in ("", PLACEHOLDER_JWT_SECRET):
        raise RuntimeError("JWT_SECRET_KEY must be set to a real secret in this environment.")
    if secret == PLACEHOLDER_JWT_SECRET:
        log.warning("JWT_SECRET_KEY is the placeholder value; do not use this outside development")

    token_cfg = AuthTokenConfig.from_seconds(
        int(app.config.get("ACCESS_TOKEN_EXPIRES_SECONDS", 3600)),
        int(app.config.get("REFRESH_TOKEN_EXPIRES_SECONDS", 604800)),
    )
    codec = JWTCredentialCodec(secret=secret, algorithm=app.config.get("JWT_ALGORITHM", "HS256"))
    app.extensions[EXTENSION_KEY] = SecurityState(
        codec=codec,
        issuer=TokenIssuer(codec, token_cfg),
        token_cfg=token_cfg,
    )


def _state() -> SecurityState:
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("folio.core.security.init_app() was not called") from exc


def get_token_issuer() -> TokenIssuer:
    return _state().issuer


def get_token_config() -> AuthTokenConfig:
    return _state().token_cfg


def build_auth_service(ctx: ServiceContext | None = None) -> AuthService:
    """Return an :class:`AuthService` bound to this app's issuer."""
    return AuthService(issuer=get_token_issuer(), ctx=ctx)
