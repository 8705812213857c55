"""Version 1 of the HTTP API."""

from __future__ import annotations

from flask import Flask

API_VERSION = "v1"


def register(app: Flask, *, prefix: str) -> None:
    """
    Register the v1 blueprints below ``prefix``.

    ``/health`` lives at the version root; the session endpoints under
    ``/auth``.
    """
    from .auth import bp as auth_bp
    from .health import bp as health_bp

    app.register_blueprint(health_bp, url_prefix=prefix)
    app.register_blueprint(auth_bp, url_prefix=f"{prefix}/auth")
