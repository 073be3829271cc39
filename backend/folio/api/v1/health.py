"""Liveness and database reachability."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from folio.api.deps import json_response, timing
from folio.core.extensions import db

bp = Blueprint("health", __name__)


def _database_ok() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("health.database_unreachable")
        db.session.rollback()
        return False
    return True


@bp.get("/health")
@timing
def healthcheck():
    return json_response(
        {
            "status": "ok",
            "db": "ok" if _database_ok() else "fail",
            "version": current_app.config.get("APP_VERSION", "dev"),
        }
    )
