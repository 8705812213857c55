"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from authsession.core.config import BaseConfig, get_config, validate_config
from authsession.core.logger import configure_logging
from authsession.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, import path or ``None`` to select by
        ``APP_ENV``.
    :raises RuntimeError: If the loaded settings fail :func:`validate_config`.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate_config(app.config)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from authsession.core import proxy

    proxy.init_app(app)

    from authsession.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from authsession.core import cors

    cors.init_app(app)

    from authsession.api import init_app as init_api

    init_api(app)

    from authsession.core import errors

    errors.init_app(app)

    from authsession import cli as app_cli

    app_cli.init_app(app)

    return app
