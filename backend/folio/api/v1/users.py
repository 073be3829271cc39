"""Account and session endpoints."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, request

from folio.api.deps import (
    build_meta,
    json_body,
    json_response,
    parse_pagination,
    require_auth,
    require_role,
    service_context,
    timing,
)
from folio.core.actor import REFRESH_COOKIE, current_rq
from folio.core.errors import Conflict, Unauthorized
from folio.core.extensions import limiter
from folio.core.security import build_auth_service
from folio.models.account import AccountRole
from folio.schemas import (
    AccountSchema,
    EmailQuerySchema,
    LoginIdQuerySchema,
    LoginSchema,
    PasswordChangeSchema,
    RefreshSchema,
    SignupSchema,
    TokenResponseSchema,
)
from folio.services._shared.errors import AccountNotFoundError, InvalidTokenError
from folio.services.auth.dto import LoginIn, RefreshIn
from folio.services.identity.dto import PasswordChangeIn, SignupIn
from folio.services.identity.service import AccountService

log = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
password_change_schema = PasswordChangeSchema()
email_query_schema = EmailQuerySchema()
login_id_query_schema = LoginIdQuerySchema()
account_schema = AccountSchema()
account_list_schema = AccountSchema(many=True)
token_schema = TokenResponseSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


# --------------------------------------------------------------------------- #
# Signup and availability checks
# --------------------------------------------------------------------------- #


@bp.post("/signup")
@timing
def signup():
    """Create an account and return its public representation."""

    data = signup_schema.load(json_body())
    account = AccountService(ctx=service_context()).signup(SignupIn(**data))
    return json_response({"data": account_schema.dump(account)}, status=201)


@bp.get("/check-email")
@timing
def check_email():
    """200 when the email is free, 409 when taken."""

    data = email_query_schema.load(request.args)
    if AccountService(ctx=service_context()).is_email_taken(data["email"]):
        raise Conflict("Email is already in use")
    return json_response({"data": {"email": data["email"], "available": True}})


@bp.get("/check-login-id")
@timing
def check_login_id():
    """200 when the login handle is free, 409 when taken."""

    data = login_id_query_schema.load(request.args)
    if AccountService(ctx=service_context()).is_login_id_taken(data["login_id"]):
        raise Conflict("Login id is already in use")
    return json_response({"data": {"login_id": data["login_id"], "available": True}})


# --------------------------------------------------------------------------- #
# Session lifecycle
# --------------------------------------------------------------------------- #


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials; return the token pair and set both cookies."""

    data = login_schema.load(json_body())
    rq = current_rq()
    pair = build_auth_service(rq.service_context()).login(
        LoginIn(identifier=data["login_id"], password=data["password"])
    )
    rq.set_auth_cookies(pair)
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange the refresh token (cookie first, then body) for a new pair."""

    data = refresh_schema.load(json_body())
    rq = current_rq()
    token = rq.get_cookie(REFRESH_COOKIE) or data.get("refresh_token")
    if not token:
        rq.clear_auth_cookies()
        raise Unauthorized("Refresh token is missing")
    try:
        pair = build_auth_service(rq.service_context()).refresh(RefreshIn(refresh_token=token))
    except InvalidTokenError:
        rq.clear_auth_cookies()
        raise
    rq.set_auth_cookies(pair)
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/logout")
@timing
def logout():
    """Forget the stored refresh token of the caller (if known) and drop cookies."""

    rq = current_rq()
    if rq.actor_id is not None:
        try:
            build_auth_service(rq.service_context()).logout(rq.actor_id)
        except AccountNotFoundError:
            log.info("Logout for account %s that no longer exists", rq.actor_id)
    rq.clear_auth_cookies()
    return json_response({"data": {"logged_out": True}})


# --------------------------------------------------------------------------- #
# Current account
# --------------------------------------------------------------------------- #


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated account."""

    rq = current_rq()
    actor = rq.current_actor()
    if actor is None:
        rq.clear_auth_cookies()
        raise Unauthorized("Account no longer exists")
    return json_response({"data": account_schema.dump(actor)})


@bp.put("/me/password")
@require_auth
@timing
def change_password():
    """Change the caller's password and end every refresh session."""

    data = password_change_schema.load(json_body())
    rq = current_rq()
    AccountService(ctx=rq.service_context()).change_password(
        PasswordChangeIn(
            account_id=rq.actor_id,
            current_password=data["current_password"],
            new_password=data["new_password"],
        )
    )
    rq.clear_auth_cookies()
    return json_response({"data": {"password_changed": True}})


# --------------------------------------------------------------------------- #
# Administration
# --------------------------------------------------------------------------- #


@bp.get("")
@require_role(AccountRole.ADMIN)
@timing
def list_accounts():
    """Return paginated accounts (admins only)."""

    pagination = parse_pagination()
    page = AccountService(ctx=service_context()).list_accounts(pagination)
    return json_response(
        {"data": account_list_schema.dump(page.items), "meta": build_meta(page.meta)}
    )
