"""Per-request authentication with silent refresh.

Runs before every request and never rejects one: it only decides who the
caller is. Route guards in :mod:`folio.api.deps` turn a missing identity into
401/403.

Order of evaluation on protected paths:

1. ``Authorization: Bearer <token>`` if present, otherwise the
   ``accessToken``/``refreshToken`` cookies.
2. A decodable access token authenticates the request.
3. Otherwise a refresh token (alone is enough) is rotated; success
   authenticates and queues both new cookies.
4. Otherwise both auth cookies are queued for deletion.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app, g, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.wrappers import Response

from folio.core.actor import (
    ACCESS_COOKIE,
    OUTCOME_AUTHENTICATED,
    OUTCOME_REFRESHED,
    REFRESH_COOKIE,
    AuthContext,
    current_rq,
)
from folio.core.extensions import db
from folio.core.security import build_auth_service
from folio.services._shared.errors import ServiceError
from folio.services.auth.dto import RefreshIn

log = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def is_protected_path(path: str) -> bool:
    """Return ``True`` when ``path`` needs credential processing."""
    public = current_app.config.get("AUTH_PUBLIC_PATHS", ())
    if path in public or path.rstrip("/") in public:
        return False
    prefixes = current_app.config.get("AUTH_PROTECTED_PREFIXES", ("/api/",))
    return any(path.startswith(prefix) for prefix in prefixes)


def bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if header[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def authenticate_request() -> None:
    """Resolve the caller for the current request into ``g.auth``."""
    # ``g`` may outlive a request when an app context is already pushed
    g.auth = AuthContext()
    if not is_protected_path(request.path):
        return

    rq = current_rq()
    access = bearer_token()
    from_header = access is not None
    refresh = None
    if not from_header:
        access = rq.get_cookie(ACCESS_COOKIE)
        refresh = rq.get_cookie(REFRESH_COOKIE)

    if not access and not refresh:
        return

    service = build_auth_service(rq.service_context())

    if access:
        identity = service.resolve_identity(access)
        if identity is not None:
            g.auth.identity = identity
            g.auth.outcome = OUTCOME_AUTHENTICATED
            return

    if refresh:
        try:
            pair = service.refresh(RefreshIn(refresh_token=refresh))
        except ServiceError as exc:
            log.info("Silent refresh failed: %s", exc.__class__.__name__)
        except SQLAlchemyError:
            log.exception("Silent refresh failed on a database error")
            db.session.rollback()
        else:
            identity = service.resolve_identity(pair.access_token)
            if identity is not None:
                g.auth.identity = identity
                g.auth.outcome = OUTCOME_REFRESHED
                rq.set_auth_cookies(pair)
                log.info("Request re-authenticated by refresh", extra={"outcome": "refreshed"})
                return

    rq.clear_auth_cookies()


def apply_cookie_ops(response: Response) -> Response:
    return current_rq().apply(response)


def init_app(app: Flask) -> None:
    """Register the authentication hooks on ``app``."""
    app.before_request(authenticate_request)
    app.after_request(apply_cookie_ops)
