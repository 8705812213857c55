"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

TOKEN_SERVICE_KEY = "token_service"
REDIS_CLIENT_KEY = "redis_client"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the token service.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`authsession.models` package so SQLAlchemy metadata is ready for
        migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from authsession import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    app.extensions.pop(REDIS_CLIENT_KEY, None)
    if app.config.get("REFRESH_STORE_BACKEND") == "redis":
        redis_url = app.config["REDIS_URL"]
        timeout = app.config.get("REDIS_SOCKET_TIMEOUT")
        client = redis.Redis.from_url(
            redis_url, socket_timeout=timeout, socket_connect_timeout=timeout
        )
        try:
            client.ping()
        except RedisError as exc:
            raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
        app.extensions[REDIS_CLIENT_KEY] = client

    app.extensions[TOKEN_SERVICE_KEY] = build_token_service(app)


def build_refresh_store(app: Flask):
    """Instantiate the refresh token store selected by ``REFRESH_STORE_BACKEND``."""
    backend = app.config.get("REFRESH_STORE_BACKEND", "sqlalchemy")
    if backend == "redis":
        from authsession.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(r=app.extensions[REDIS_CLIENT_KEY])
    if backend == "memory":
        from authsession.services._shared.ports import InMemoryRefreshTokenStore

        return InMemoryRefreshTokenStore()

    from authsession.infra.sqlalchemy.refresh_token_store import SQLAlchemyRefreshTokenStore

    return SQLAlchemyRefreshTokenStore()


def build_token_service(app: Flask):
    """Wire the signer and refresh store into a :class:`TokenService`."""
    from authsession.infra.jwt.jwt_signer import JWTSigner
    from authsession.services.tokens.service import TokenService

    signer = JWTSigner(
        access_secret=app.config["JWT_SECRET_KEY"],
        refresh_secret=app.config["JWT_REFRESH_SECRET_KEY"],
        access_ttl=app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        refresh_ttl=app.config["JWT_REFRESH_TOKEN_EXPIRES"],
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
    )
    return TokenService(signer=signer, store=build_refresh_store(app))


def get_token_service():
    """Return the token service bound to the current application."""
    service = current_app.extensions.get(TOKEN_SERVICE_KEY)
    if service is None:
        raise RuntimeError("Token service is not initialized. Call init_app() first.")
    return service


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    client = current_app.extensions.get(REDIS_CLIENT_KEY)
    if client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return client
