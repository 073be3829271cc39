"""Account resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

LOGIN_ID_PATTERN = r"^[A-Za-z0-9_.-]+$"


class SignupSchema(Schema):
    """Payload for creating an account."""

    login_id = fields.String(
        required=True,
        validate=[
            validate.Length(min=4, max=50),
            validate.Regexp(
                LOGIN_ID_PATTERN,
                error="Use letters, digits, '.', '_' or '-' only.",
            ),
        ],
    )
    email = fields.Email(required=True, validate=validate.Length(max=100))
    password = fields.String(required=True, validate=validate.Length(max=128))
    nickname = fields.String(load_default=None, validate=validate.Length(min=1, max=50))
    image_url = fields.Url(load_default=None, validate=validate.Length(max=512))
    bio = fields.String(load_default=None, validate=validate.Length(max=2000))


class PasswordChangeSchema(Schema):
    """Payload for ``PUT /users/me/password``."""

    current_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(max=128))


class EmailQuerySchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=100))


class LoginIdQuerySchema(Schema):
    login_id = fields.String(required=True, validate=validate.Length(min=1, max=50))


class AccountSchema(Schema):
    """Public representation of an account."""

    id = fields.Integer(required=True)
    login_id = fields.String(required=True)
    email = fields.Email(required=True)
    nickname = fields.String(required=True)
    role = fields.String(required=True)
    image_url = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
