"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class LoginSchema(Schema):
    """Input payload for signing in; ``login_id`` may also be an email."""

    login_id = fields.String(required=True, validate=validate.Length(min=1, max=100))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Optional body for clients that cannot send the refresh cookie."""

    refresh_token = fields.String(load_default=None, validate=validate.Length(min=1, max=512))


class TokenResponseSchema(Schema):
    """Response payload containing the issued token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("Bearer")
