"""``flask`` CLI commands."""

from __future__ import annotations

from flask import Flask

from .accounts import accounts_cli


def init_app(app: Flask) -> None:
    """Add the ``accounts`` group to ``flask``."""
    app.cli.add_command(accounts_cli)
