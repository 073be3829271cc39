"""Reverse-proxy header handling."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app in :class:`~werkzeug.middleware.proxy_fix.ProxyFix`.

    Controlled by ``USE_PROXYFIX``. One hop is trusted for
    ``X-Forwarded-For/Proto/Host/Prefix``; ``request.is_secure`` then reflects
    the client-facing scheme, which the cookie policy uses when
    ``COOKIE_SECURE`` is unset.
    """
    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)
