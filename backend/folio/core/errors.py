"""
Problem Details (RFC 7807) responses for every error the API can surface.

Bodies always carry ``type``, ``title``, ``status``, ``detail``, ``instance``,
a stable snake_case ``code`` and the ``request_id`` of the failing request.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from folio.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "unprocessable_entity",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def code_for_status(status: int) -> str:
    return _STATUS_CODES.get(int(status), "error")


def problem(
    status: int,
    detail: str,
    *,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Render a problem+json response.

    :param status: HTTP status.
    :param detail: Client-safe message.
    :param code: Stable error code; derived from ``status`` when omitted.
    :param details: Optional structured extras (``{"errors": ...}`` for 422).
    :returns: ``(response, status)`` ready to return from a handler.
    """
    status = int(status)
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "instance": request.path if request else None,
        "code": code or code_for_status(status),
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, status


def _log(status: int, kind: str, code: str, detail: str, *, exc_info: bool = False) -> None:
    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s detail=%s request_id=%s",
        kind,
        code,
        status,
        detail,
        ensure_request_id(),
        exc_info=exc_info,
    )


class APIError(Exception):
    """
    Error raised by views (or translated from the service layer) that maps
    straight onto a problem response.

    :param message: Client-facing description.
    :param status_code: HTTP status, ``400`` by default.
    :param code: Machine-readable code, ``"bad_request"`` by default.
    :param details: Optional structured payload.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = int(status_code or type(self).status_code)
        self.code = code or type(self).code
        self.details = details or {}


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    Service errors reach clients through
    :meth:`folio.services._shared.base.BaseService.translate_exceptions`.
    Raw database and unexpected errors are logged with their traceback and
    answered with a generic message.
    """
    from folio.services._shared.base import BaseService
    from folio.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def on_api_error(err: APIError):
        _log(err.status_code, "APIError", err.code, err.message)
        return problem(err.status_code, err.message, code=err.code, details=err.details)

    @app.errorhandler(ServiceError)
    def on_service_error(err: ServiceError):
        translated = BaseService().translate_exceptions(err)
        if isinstance(translated, APIError):
            return on_api_error(translated)
        return on_unexpected(err)

    @app.errorhandler(HTTPException)
    def on_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = code_for_status(status)
        if status == HTTPStatus.NOT_FOUND and request:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or code.replace("_", " ").capitalize()).strip()
        _log(status, "HTTPException", code, detail)
        return problem(status, detail, code=code)

    @app.errorhandler(MarshmallowValidationError)
    def on_validation_error(err: MarshmallowValidationError):
        _log(HTTPStatus.UNPROCESSABLE_ENTITY, "ValidationError", "validation_error", "Validation failed")
        return problem(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "Validation failed",
            code="validation_error",
            details={"errors": err.messages},
        )

    @app.errorhandler(IntegrityError)
    def on_integrity_error(err: IntegrityError):
        _log(HTTPStatus.CONFLICT, "IntegrityError", "conflict", str(err.orig), exc_info=True)
        return problem(HTTPStatus.CONFLICT, "Resource conflict")

    @app.errorhandler(OperationalError)
    def on_operational_error(err: OperationalError):
        _log(HTTPStatus.SERVICE_UNAVAILABLE, "OperationalError", "service_unavailable", str(err.orig), exc_info=True)
        return problem(HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def on_unexpected(err: Exception):
        _log(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "Unhandled exception",
            "internal_server_error",
            type(err).__name__,
            exc_info=True,
        )
        return problem(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected error")
