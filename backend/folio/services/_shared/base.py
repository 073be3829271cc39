# folio/services/_shared/base.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from folio.core import errors as api_errors
from folio.repositories.base import Pagination
from folio.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
)
from folio.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

# Order matters: the first matching service error class wins.
_HTTP_TRANSLATIONS: tuple[tuple[tuple[type[ServiceError], ...], type[api_errors.APIError]], ...] = (
    ((InvalidCredentialsError, InvalidTokenError), api_errors.Unauthorized),
    ((NotFoundError,), api_errors.NotFound),
    ((ConflictError,), api_errors.Conflict),
    ((ServiceError,), api_errors.APIError),
)


@dataclass(slots=True)
class ServiceContext:
    """
    Request-scoped data handed to services.

    :param actor_id: Id of the signed-in account, ``None`` when anonymous.
    :param role: ``"USER"`` or ``"ADMIN"`` for a signed-in actor.
    :param request_id: Correlation id used in logs.
    """

    actor_id: int | None = None
    role: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Common ground for application services.

    Services open a unit of work per use case and never reach for the global
    session themselves. They raise :class:`ServiceError` subclasses; the HTTP
    layer turns those into problem responses via :meth:`translate_exceptions`.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Open a read-only unit of work.

        :param isolation: Isolation level, ``DEFAULT_READ_ISOLATION`` if omitted.
        :param enforce_db_readonly: Ask the database for a read-only transaction too.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Clamp ``page`` and ``limit`` to at least 1 and copy the sort tokens."""
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or []))

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map a service error onto its HTTP counterpart.

        Credential and token failures become 401, missing rows 404, uniqueness
        collisions 409 and any other :class:`ServiceError` 400. Anything else
        is returned unchanged.

        :param exc: Exception raised inside a service.
        :rtype: Exception
        """
        for service_types, api_type in _HTTP_TRANSLATIONS:
            if isinstance(exc, service_types):
                return api_type(str(exc))
        return exc
