"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Selects the config class below
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset(
    {"CHANGE_ME", "CHANGE_ME_JWT", "CHANGE_ME_JWT_REFRESH"}
)

REFRESH_STORE_BACKENDS: Final[frozenset[str]] = frozenset({"sqlalchemy", "redis", "memory"})


# Load .env in development (no-op when absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Access-token secret. Shared with ``flask-jwt-extended`` so protected
        routes verify the access tokens issued by the token service.
    JWT_REFRESH_SECRET_KEY: str
        Distinct secret for refresh tokens.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes (30 minutes / 30 days by default).
    REFRESH_STORE_BACKEND: str
        ``"sqlalchemy"`` (default), ``"redis"`` or ``"memory"``.
    REDIS_URL / REDIS_SOCKET_TIMEOUT:
        Redis connection used when the backend is ``"redis"``; the timeout
        bounds every store call.
    PASSWORD_HASH_METHOD: str
        Method passed to :func:`werkzeug.security.generate_password_hash`.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    USE_PROXYFIX / PROXYFIX_HOPS:
        Whether to trust ``X-Forwarded-*`` headers, and from how many proxies.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_REFRESH_SECRET_KEY = os.getenv("JWT_REFRESH_SECRET_KEY", "CHANGE_ME_JWT_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_ACCESS_TOKEN_MINUTES", 30))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("JWT_REFRESH_TOKEN_DAYS", 30))
    JWT_TOKEN_LOCATION = ["headers"]
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Refresh token persistence
    REFRESH_STORE_BACKEND = os.getenv("REFRESH_STORE_BACKEND", "sqlalchemy").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8080")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Keeps refresh tokens in process memory so no Redis is needed.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "testing-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET_KEY = "testing-refresh-secret-0123456789abcdef"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REFRESH_STORE_BACKEND = "memory"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PROPAGATE_EXCEPTIONS = True
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    :func:`validate_config` refuses placeholder or shared token secrets.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# APP_ENV value -> config class
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, object]) -> None:
    """Fail fast on settings the token lifecycle cannot run with.

    :param config: Loaded Flask config mapping.
    :raises RuntimeError: On an unknown store backend, a Redis backend without
        ``REDIS_URL``, or (outside debug/testing) placeholder or shared secrets.
    """
    backend = str(config.get("REFRESH_STORE_BACKEND", "sqlalchemy"))
    if backend not in REFRESH_STORE_BACKENDS:
        raise RuntimeError(f"Unknown REFRESH_STORE_BACKEND {backend!r}")
    if backend == "redis" and not config.get("REDIS_URL"):
        raise RuntimeError("REFRESH_STORE_BACKEND=redis requires REDIS_URL")

    access = config.get("JWT_SECRET_KEY")
    refresh = config.get("JWT_REFRESH_SECRET_KEY")
    if access == refresh:
        raise RuntimeError("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ")
    if config.get("DEBUG") or config.get("TESTING"):
        return
    if access in PLACEHOLDER_SECRETS or refresh in PLACEHOLDER_SECRETS:
        raise RuntimeError("Refusing to start with placeholder JWT secrets")
