"""
Service-layer exceptions.

Nothing here knows about Flask or HTTP status codes; the API maps these onto
problem responses through ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Whether ``exc`` was raised by the constraint ``constraint_name``.

    PostgreSQL and MySQL name the constraint in the driver message. SQLite
    names the column instead (``UNIQUE constraint failed: accounts.email``),
    so ``uq_<table>_<column>`` is also matched as ``<table>.<column>``.
    """
    message = str(exc.orig or "").lower()
    name = constraint_name.lower()
    if name in message:
        return True
    prefix, _, rest = name.partition("_")
    table, _, column = rest.partition("_")
    return prefix == "uq" and bool(column) and f"{table}.{column}" in message


class ServiceError(Exception):
    """Root of every error a service raises on purpose."""


class NotFoundError(ServiceError):
    """``entity`` looked up by ``key`` does not exist."""

    def __init__(self, entity: str, key: str | int) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class AccountNotFoundError(NotFoundError):
    def __init__(self, key: str | int) -> None:
        super().__init__("Account", key)


class ConflictError(ServiceError):
    """A uniqueness rule on ``entity`` would be broken."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Conflict on {entity}: {detail}")


class InvalidCredentialsError(ServiceError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """
    A refresh credential that cannot be honored.

    Raised for codec rejections (signature, expiry, malformed input), a token
    no account currently stores, an owner mismatch, and a rotation lost to a
    concurrent refresh of the same token.
    """

    def __init__(self, message: str = "Invalid or expired refresh token") -> None:
        super().__init__(message)


class PasswordPolicyError(ServiceError):
    """The candidate password breaks the password policy; message lists why."""
