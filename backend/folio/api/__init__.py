"""Versioned HTTP API."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def join_prefix(*segments: str) -> str:
    """``join_prefix("/api/", "v1", "/users")`` -> ``"/api/v1/users"``."""
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask, *, base_prefix: str, entries: Iterable[tuple[Blueprint, str]]
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` under ``base_prefix``."""
    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    from folio.api import v1

    base = join_prefix(app.config.get("API_BASE_PREFIX", "/api"), v1.API_VERSION)
    register_blueprint_group(app, base_prefix=base, entries=v1.REGISTRY)


__all__ = ["init_app", "join_prefix", "register_blueprint_group"]
