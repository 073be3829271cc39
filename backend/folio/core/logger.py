"""
JSON logging to stdout.

Every record carries the request id (taken from ``X-Request-ID`` or
``X-Correlation-ID``, generated otherwise) and the id of the signed-in
account, so one request can be followed across log lines.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

_BASE_FIELDS = ("request_id", "actor_id")
_OPTIONAL_FIELDS = ("endpoint", "path", "elapsed_ms", "outcome")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        entry.update({field: getattr(record, field, None) for field in _BASE_FIELDS})
        entry.update(
            {field: getattr(record, field) for field in _OPTIONAL_FIELDS if hasattr(record, field)}
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        in_request = has_request_context()
        record.request_id = ensure_request_id() if in_request else None
        record.actor_id = current_actor_id() if in_request else None
        return True


def ensure_request_id() -> str:
    """
    Id of the current request, fixed on first use.

    ``g`` can outlive one request when an app context is already pushed
    (tests), so the cached id is tied to the request object that set it.
    Outside a request a fresh id is returned each call.
    """
    if not has_request_context():
        return str(uuid4())

    current = request._get_current_object()  # type: ignore[attr-defined]
    cached = g.get("request_id")
    if cached and g.get("request_id_owner") is current:
        return cached

    inbound = (request.headers.get(name) for name in INBOUND_ID_HEADERS)
    request_id = next((value for value in inbound if value), None) or str(uuid4())
    g.request_id = request_id
    g.request_id_owner = current
    return request_id


def current_actor_id() -> int | None:
    """Account id resolved by the authentication middleware, or ``None``."""
    identity = getattr(g.get("auth"), "identity", None)
    return getattr(identity, "account_id", None)


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with a single JSON stdout handler at ``level``."""
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())

    logging.basicConfig(level=level, handlers=[handler], force=True)


def init_app(app: Flask) -> None:
    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def assign_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "current_actor_id", "ensure_request_id", "init_app"]
