"""
DTOs for AccountService.

Data Transfer Objects isolate the service layer from ORM models, ensuring
clear input/output contracts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from folio.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for account signup.

    :param login_id: Login handle.
    :type login_id: str
    :param email: Email address (normalized to lowercase).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param nickname: Display name; defaults to ``login_id``.
    :type nickname: str | None
    :param image_url: Optional avatar location.
    :type image_url: str | None
    :param bio: Optional profile text; a default is generated when absent.
    :type bio: str | None
    :param role: ``"USER"`` (default) or ``"ADMIN"``; only the CLI passes ADMIN.
    :type role: str
    """

    login_id: str
    email: str
    password: str
    nickname: str | None = None
    image_url: str | None = None
    bio: str | None = None
    role: str = "USER"


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing an account's password.

    :param account_id: Account identifier.
    :type account_id: int
    :param current_password: Current password.
    :type current_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    account_id: int
    current_password: str
    new_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class AccountOut:
    """
    Public-safe account representation (no hash, no refresh token).

    :param id: Account identifier.
    :param login_id: Login handle.
    :param email: Email address.
    :param nickname: Display name.
    :param role: ``"USER"`` or ``"ADMIN"``.
    :param image_url: Optional avatar location.
    :param bio: Optional profile text.
    :param created_at: Creation timestamp.
    """

    id: int
    login_id: str
    email: str
    nickname: str
    role: str
    image_url: str | None
    bio: str | None
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class AccountPageOut:
    """One page of accounts plus pagination metadata."""

    items: list[AccountOut]
    meta: PageMeta
