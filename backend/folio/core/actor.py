"""Per-request actor access and cookie handling.

The authentication middleware publishes an :class:`AuthContext` on
``flask.g``; views and services read it through :func:`current_rq`, which
also queues cookie writes so every cookie leaves with the same attributes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from flask import current_app, g, request
from werkzeug.wrappers import Response

from folio.core.logger import ensure_request_id
from folio.core.security import get_token_config
from folio.services._shared.base import ServiceContext
from folio.services.auth.dto import ClaimSet, TokenPairOut
from folio.services.identity.dto import AccountOut
from folio.services.identity.service import AccountService

log = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

OUTCOME_ANONYMOUS = "anonymous"
OUTCOME_AUTHENTICATED = "authenticated"
OUTCOME_REFRESHED = "refreshed"


@dataclass(frozen=True, slots=True)
class CookieOp:
    """A pending cookie write; ``value=None`` deletes the cookie."""

    name: str
    value: str | None
    max_age: int | None = None


@dataclass(slots=True)
class AuthContext:
    """
    Request-scoped authentication result.

    :param identity: Claims of the authenticated caller, if any.
    :param outcome: ``anonymous``, ``authenticated`` or ``refreshed``.
    :param cookie_ops: Cookie writes applied in ``after_request``, last one per
        name wins.
    """

    identity: ClaimSet | None = None
    outcome: str = OUTCOME_ANONYMOUS
    cookie_ops: dict[str, CookieOp] = field(default_factory=dict)
    actor_loaded: bool = False
    actor: AccountOut | None = None


@dataclass(frozen=True, slots=True)
class CookiePolicy:
    """
    Attributes shared by every cookie the API writes.

    ``secure=None`` follows the request scheme; ``SameSite=None`` always
    forces ``Secure`` because browsers drop the cookie otherwise.
    """

    secure: bool | None = None
    samesite: str = "Lax"
    domain: str | None = None
    path: str = "/"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> CookiePolicy:
        return cls(
            secure=config.get("COOKIE_SECURE"),
            samesite=config.get("COOKIE_SAMESITE") or "Lax",
            domain=config.get("COOKIE_DOMAIN"),
        )

    def is_secure(self, request_is_secure: bool) -> bool:
        if self.samesite.lower() == "none":
            return True
        if self.secure is None:
            return request_is_secure
        return bool(self.secure)

    def write(self, response: Response, op: CookieOp, *, request_is_secure: bool) -> None:
        secure = self.is_secure(request_is_secure)
        if op.value is None:
            response.delete_cookie(
                op.name,
                path=self.path,
                domain=self.domain,
                secure=secure,
                httponly=True,
                samesite=self.samesite,
            )
        else:
            response.set_cookie(
                op.name,
                op.value,
                max_age=op.max_age,
                path=self.path,
                domain=self.domain,
                secure=secure,
                httponly=True,
                samesite=self.samesite,
            )


class ActorResolver:
    """Read the resolved caller and stage cookie writes for the current request."""

    def __init__(self, ctx: AuthContext, policy: CookiePolicy) -> None:
        self.ctx = ctx
        self.policy = policy

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    @property
    def identity(self) -> ClaimSet | None:
        return self.ctx.identity

    @property
    def is_authenticated(self) -> bool:
        return self.ctx.identity is not None

    @property
    def actor_id(self) -> int | None:
        return self.ctx.identity.account_id if self.ctx.identity else None

    def current_actor(self) -> AccountOut | None:
        """
        Load the caller's account, once per request.

        Returns ``None`` for anonymous callers and for tokens whose account no
        longer exists.
        """
        if not self.ctx.actor_loaded:
            identity = self.ctx.identity
            if identity is not None:
                self.ctx.actor = AccountService(ctx=self.service_context()).find_account(
                    identity.account_id
                )
                if self.ctx.actor is None:
                    log.info("Token refers to missing account %s", identity.account_id)
            self.ctx.actor_loaded = True
        return self.ctx.actor

    def service_context(self) -> ServiceContext:
        identity = self.ctx.identity
        return ServiceContext(
            actor_id=identity.account_id if identity else None,
            role=identity.role if identity else None,
            request_id=ensure_request_id(),
        )

    # ------------------------------------------------------------------ #
    # Cookies
    # ------------------------------------------------------------------ #

    def get_cookie(self, name: str) -> str | None:
        return request.cookies.get(name) or None

    def set_cookie(self, name: str, value: str, max_age: int | None = None) -> None:
        self.ctx.cookie_ops[name] = CookieOp(name=name, value=value, max_age=max_age)

    def delete_cookie(self, name: str) -> None:
        self.ctx.cookie_ops[name] = CookieOp(name=name, value=None)

    def set_auth_cookies(self, pair: TokenPairOut) -> None:
        cfg = get_token_config()
        self.set_cookie(ACCESS_COOKIE, pair.access_token, int(cfg.access_expires.total_seconds()))
        self.set_cookie(
            REFRESH_COOKIE, pair.refresh_token, int(cfg.refresh_expires.total_seconds())
        )

    def clear_auth_cookies(self) -> None:
        self.delete_cookie(ACCESS_COOKIE)
        self.delete_cookie(REFRESH_COOKIE)

    def apply(self, response: Response) -> Response:
        """Write every queued cookie operation onto ``response``."""
        for op in self.ctx.cookie_ops.values():
            self.policy.write(response, op, request_is_secure=request.is_secure)
        self.ctx.cookie_ops.clear()
        return response


def current_auth() -> AuthContext:
    """Return the request's :class:`AuthContext`, creating an anonymous one if absent."""
    ctx = getattr(g, "auth", None)
    if not isinstance(ctx, AuthContext):
        ctx = AuthContext()
        g.auth = ctx
    return ctx


def current_rq() -> ActorResolver:
    """Return an :class:`ActorResolver` for the active request."""
    return ActorResolver(current_auth(), CookiePolicy.from_config(current_app.config))
