"""
Units of work over the Flask-scoped SQLAlchemy session.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from folio.core.extensions import db
from folio.repositories import AccountRepository
from folio.uow.base import UnitOfWork

log = logging.getLogger(__name__)

# Dialects that accept ``SET TRANSACTION ...`` as the first statement
_SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

_WRITE_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "merge",
    "replace",
    "create",
    "alter",
    "drop",
    "truncate",
    "grant",
    "revoke",
)

_ISOLATION_LEVELS = ("READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE")


class SQLAlchemyRepositoryContainer:
    """Repositories bound to one session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.accounts = AccountRepository(session=session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write scope: commit when the block exits cleanly, roll back otherwise.

    A failed commit is rolled back before the error propagates.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only scope.

    While active, an ORM flush with pending changes and any write statement
    raise :class:`RuntimeError`. When the scope opens its own transaction it
    also applies ``SET TRANSACTION`` (isolation level and ``READ ONLY``) on
    dialects that accept it, and always rolls back on exit. Inside an already
    running transaction it only adds the guards.

    :param isolation_level: Optional isolation hint such as ``"READ COMMITTED"``.
    :param enforce_db_readonly: Also issue ``SET TRANSACTION READ ONLY``.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._txn: SessionTransaction | None = None
        self._conn: Connection | None = None
        self._guards: tuple | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            self._txn = self.session.begin()
        except InvalidRequestError:
            # The session is already inside a transaction; join it.
            self._txn = None

        self._conn = self.session.connection()
        self._install_guards()
        if self._txn is not None and self._conn.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._set_transaction_characteristics()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn is not None:
                with suppress(SQLAlchemyError):
                    self._txn.rollback()
        finally:
            self._txn = None
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    def _set_transaction_characteristics(self) -> None:
        statements = []
        if self.isolation_level:
            level = self.isolation_level.upper().strip()
            if level not in _ISOLATION_LEVELS:
                log.warning("Unknown isolation level %r; passing it through.", level)
            statements.append(f"SET TRANSACTION ISOLATION LEVEL {level}")
        if self.enforce_db_readonly:
            statements.append("SET TRANSACTION READ ONLY")
        try:
            for statement in statements:
                self.session.execute(text(statement))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION failed (%s); relying on guards only.", exc)

    def _install_guards(self) -> None:
        def block_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def block_writes(conn, cursor, statement, parameters, context, executemany):
            words = statement.split(None, 1) if statement else []
            keyword = words[0].lower() if words else ""
            if keyword.startswith(_WRITE_KEYWORDS):
                raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

        event.listen(self.session, "before_flush", block_flush)
        event.listen(self._conn, "before_cursor_execute", block_writes)
        self._guards = (block_flush, block_writes)

    def _remove_guards(self) -> None:
        if self._guards is None:
            return
        block_flush, block_writes = self._guards
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", block_flush)
        if self._conn is not None:
            with suppress(InvalidRequestError):
                event.remove(self._conn, "before_cursor_execute", block_writes)
        self._guards = None
