"""HTTP API: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask


def init_app(app: Flask) -> None:
    """Mount every API version on ``app``."""
    from authsession.api import v1

    base = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")
    v1.register(app, prefix=f"{base}/{v1.API_VERSION}")


__all__ = ["init_app"]
