"""Convenience exports for application schemas."""

from __future__ import annotations

from .account import (
    AccountSchema,
    EmailQuerySchema,
    LoginIdQuerySchema,
    PasswordChangeSchema,
    SignupSchema,
)
from .auth import LoginSchema, RefreshSchema, TokenResponseSchema
from .common import MetaSchema, PaginationQuerySchema

__all__ = [
    "AccountSchema",
    "EmailQuerySchema",
    "LoginIdQuerySchema",
    "PasswordChangeSchema",
    "SignupSchema",
    "LoginSchema",
    "RefreshSchema",
    "TokenResponseSchema",
    "MetaSchema",
    "PaginationQuerySchema",
]
