"""View helpers: query parsing, JSON responses, auth guards and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from folio.core.actor import current_rq
from folio.core.errors import Forbidden, Unauthorized
from folio.schemas.common import MetaSchema, PaginationQuerySchema
from folio.services._shared.base import ServiceContext
from folio.services._shared.dto import PageMeta, PaginationIn

F = TypeVar("F", bound=Callable[..., Any])

_meta_schema = MetaSchema()


def parse_pagination(default_limit: int = 20, max_limit: int = 200) -> PaginationIn:
    """``page``/``limit``/``sort`` from the query string; 422 when invalid."""
    data = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit).load(
        request.args
    )
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


def build_meta(meta: PageMeta) -> dict[str, Any]:
    """Serialize :class:`PageMeta` into the ``meta`` block of a list response."""
    return _meta_schema.dump(meta)


def service_context() -> ServiceContext:
    """Return the :class:`ServiceContext` for the current caller."""

    return current_rq().service_context()


def json_body() -> dict[str, Any]:
    """Return the JSON object body, or an empty mapping."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    resp = jsonify(payload)
    resp.status_code = status
    return resp


def _guarded(func: F, role: str | None = None) -> F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        identity = current_rq().identity
        if identity is None:
            raise Unauthorized("Authentication required")
        if role is not None and identity.role != role:
            raise Forbidden("Insufficient role")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_auth(func: F) -> F:
    """401 unless the authentication middleware resolved a caller."""
    return _guarded(func)


def require_role(role: str) -> Callable[[F], F]:
    """401 for anonymous callers, 403 unless the access token carries ``role``."""
    expected = str(getattr(role, "value", role))
    return lambda func: _guarded(func, expected)


def timing(func: F) -> F:
    """Log the view's duration at DEBUG as ``request.elapsed``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        started = time.perf_counter_ns()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter_ns() - started) / 1e6, 2),
                },
            )

    return wrapper  # type: ignore[return-value]
