"""Flask application factory."""

from __future__ import annotations

from flask import Flask

from folio.core.config import BaseConfig, get_config
from folio.core.logger import configure_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """
    Create the app.

    ``config`` defaults to the class selected by ``APP_ENV``; an instance
    ``config.py`` (if present) overrides it. Hooks are registered in order:
    ProxyFix first so the request scheme is right for cookie flags, request
    ids before the authentication middleware so its log lines carry them.
    """
    from folio import api, cli
    from folio.core import auth_middleware, cors, errors, extensions, logger, proxy, security

    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    for component in (
        proxy,
        extensions,
        logger,
        cors,
        security,
        auth_middleware,
        api,
        errors,
        cli,
    ):
        component.init_app(app)

    return app
