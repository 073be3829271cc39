"""CORS for ``/api/*``."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def allowed_origins(raw: str) -> list[str] | None:
    """Parse ``CORS_ORIGINS``; ``None`` means any origin (blank or ``*``)."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return None
    return origins


def init_app(app: Flask) -> None:
    """
    Enable CORS on the API.

    Auth cookies only travel cross-site when ``CORS_ORIGINS`` names the
    origins explicitly; the wildcard form never allows credentials.
    """
    origins = allowed_origins(app.config.get("CORS_ORIGINS", ""))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=origins is not None,
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
