"""
Unit of Work contract used by the application services.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.repositories.account import AccountRepository


class UnitOfWork(ABC):
    """
    One transactional scope for a use case.

    Every repository exposed by a unit of work shares its session, so all of
    them see (and commit or discard) the same changes.
    """

    accounts: AccountRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
