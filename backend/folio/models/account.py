"""Account model: login identity, profile and the current refresh token."""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from folio.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class AccountRole(str, Enum):
    """Authorization role carried in access tokens."""

    USER = "USER"
    ADMIN = "ADMIN"

    @property
    def is_admin(self) -> bool:
        return self is AccountRole.ADMIN


class Account(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Portfolio account used to sign in and own content.

    Fields
    ------
    login_id : str
        Login handle. Unique, trimmed.
    email : str
        Contact and alternative login. Stored normalized (lowercase, trimmed).
    password_hash : str
        Hashed password (write-only setter via ``password``).
    nickname : str
        Display name placed in access tokens as ``displayName``.
    role : AccountRole
        ``USER`` or ``ADMIN``.
    image_url : str | None
        Optional avatar location.
    bio : str | None
        Optional profile text.
    refresh_token : str | None
        The only refresh token currently honored for this account. Replaced on
        every login and rotation, cleared on logout and password change.
    """

    __tablename__ = "accounts"
    __repr_attrs__ = ("id", "login_id")

    login_id: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[AccountRole] = mapped_column(
        SAEnum(AccountRole, name="account_role", native_enum=False, length=16),
        nullable=False,
        default=AccountRole.USER,
    )
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(String(512), nullable=True)

    __table_args__ = (
        UniqueConstraint("login_id", name="uq_accounts_login_id"),
        UniqueConstraint("email", name="uq_accounts_email"),
        Index("ix_accounts_refresh_token", "refresh_token"),
    )

    # Passwords are write-only: set ``password``, check with ``verify_password``.
    @property
    def password(self) -> Any:
        raise AttributeError("Account.password cannot be read.")

    @password.setter
    def password(self, raw: str) -> None:
        if not raw or not isinstance(raw, str):
            raise ValueError("A password is required.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        return bool(self.password_hash) and check_password_hash(self.password_hash, raw)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """Lowercase and trim; the schema layer does the strict format check."""
        email = value.strip().lower() if isinstance(value, str) else ""
        local, _, domain = email.partition("@")
        if not local or "." not in domain:
            raise ValueError(f"Invalid email address: {value!r}")
        return email

    @validates("login_id", "nickname")
    def _strip_required(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
