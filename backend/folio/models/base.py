"""Column mixins shared by mapped models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


def _utc_column(**kwargs) -> Mapped[datetime]:
    return mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), **kwargs)


class PKMixin:
    """Integer surrogate key ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class TimestampMixin:
    """Database-maintained ``created_at`` / ``updated_at`` (timezone aware)."""

    created_at: Mapped[datetime] = _utc_column()
    updated_at: Mapped[datetime] = _utc_column(onupdate=func.now())


class ReprMixin:
    """``<Model id=... attr=...>`` using the names listed in ``__repr_attrs__``."""

    __repr_attrs__ = ("id",)

    def __repr__(self) -> str:
        parts = " ".join(f"{name}={getattr(self, name, None)!r}" for name in self.__repr_attrs__)
        return f"<{type(self).__name__} {parts}>"
