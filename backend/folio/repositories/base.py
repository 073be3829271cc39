"""Shared repository plumbing for SQLAlchemy 2.x.

Repositories only read and stage rows. They flush so primary keys and
constraint errors surface early, but transaction boundaries belong to the
units of work in :mod:`folio.uow`.

Callers never pass column names straight into SQL: sorting, equality filters
and updates all go through per-repository whitelists.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from folio.core.extensions import db

E = TypeVar("E")


@dataclass(slots=True)
class Pagination:
    """Page request: 1-based ``page``, ``limit`` rows and public sort tokens.

    A leading ``-`` on a sort token means descending (``"-created_at"``).
    """

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    items: Sequence[E]
    total: int
    page: int
    limit: int


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Turn ``["-created_at", "login_id"]`` into ``[("created_at", True), ("login_id", False)]``.

    Blank tokens are dropped.
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        descending = token.startswith("-")
        name = token.lstrip("-").strip()
        if name:
            parsed.append((name, descending))
    return parsed


class BaseRepository(Generic[E]):
    """Persistence-only repository for one mapped model.

    Subclasses set ``model`` and override the ``_sortable_fields``,
    ``_filterable_fields`` and ``_updatable_fields`` whitelists they need.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """The injected session, falling back to the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Query helpers ----------------------------

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any] | None) -> Select[Any]:
        """Add ``column == value`` clauses for whitelisted keys; others are ignored."""
        allowed = self._filterable_fields()
        clauses = [allowed[k] == v for k, v in (filters or {}).items() if k in allowed]
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _order_by(self, stmt: Select[Any], tokens: Iterable[str]) -> Select[Any]:
        """Sort by whitelisted tokens, then by primary key so pages are stable."""
        sortable = self._sortable_fields()
        orders = [
            sortable[name].desc() if descending else sortable[name].asc()
            for name, descending in parse_sort_tokens(tokens)
            if name in sortable
        ]
        pk_attr = self._pk_attr()
        if pk_attr is not None:
            orders.append(pk_attr.asc())
        return stmt.order_by(*orders) if orders else stmt

    # --------------------------------- Reads ---------------------------------

    def get(self, entity_id: Any) -> E | None:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__} has no primary key attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        stmt = self._where(select(self.model), filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        return bool(self.session.execute(stmt).scalar_one())

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[E]:
        """Return one page of rows plus the unpaged total.

        :param pagination: Page number, size and sort tokens.
        :param filters: Optional whitelisted equality filters.
        :rtype: Page
        """
        page = max(int(pagination.page), 1)
        limit = max(int(pagination.limit), 1)
        base = self._where(select(self.model), filters)

        total = self.session.execute(
            select(func.count()).select_from(base.subquery())
        ).scalar_one()
        rows = self.session.execute(
            self._order_by(base, pagination.sort).limit(limit).offset((page - 1) * limit)
        )
        return Page(items=list(rows.scalars().all()), total=int(total), page=page, limit=limit)

    # -------------------------------- Writes ---------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is populated."""
        self.session.add(instance)
        self.flush()
        return instance

    def flush(self) -> None:
        self.session.flush()

    def update(self, instance: E, **fields: Any) -> E:
        """Assign whitelisted ``fields`` through ``setattr`` (so validators run) and flush.

        :raises ValueError: If any key is outside ``_updatable_fields``.
        """
        allowed = self._updatable_fields()
        rejected = sorted(k for k in fields if k not in allowed)
        if rejected:
            raise ValueError(f"Unknown or non-updatable fields: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.flush()
        return instance
