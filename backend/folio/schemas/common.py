"""Schemas shared by list endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_load, validate


class PaginationQuerySchema(Schema):
    """
    ``?page=2&limit=50&sort=-created_at,login_id``.

    ``limit`` falls back to ``default_limit`` and is capped at ``max_limit``;
    ``sort`` is split into a list of tokens.
    """

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    def __init__(self, *, default_limit: int = 20, max_limit: int = 200, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.default_limit = default_limit
        self.max_limit = max_limit

    @post_load
    def normalize(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["limit"] = min(data.get("limit", self.default_limit), self.max_limit)
        data["sort"] = [token.strip() for token in data["sort"].split(",") if token.strip()]
        return data


class MetaSchema(Schema):
    """``meta`` block of a paginated response."""

    total = fields.Integer()
    page = fields.Integer()
    limit = fields.Integer()
    has_prev = fields.Boolean()
    has_next = fields.Boolean()
