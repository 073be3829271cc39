"""Persistence-layer access for domain models."""

from __future__ import annotations

from folio.repositories.account import AccountRepository
from folio.repositories.base import BaseRepository, Page, Pagination

__all__ = ["AccountRepository", "BaseRepository", "Page", "Pagination"]
