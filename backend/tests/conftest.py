"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Refresh tokens are
kept in an in-memory store that is emptied before every test.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from authsession.core.config import TestingConfig
from authsession.core.extensions import db as _db  # Flask-SQLAlchemy instance
from authsession.core.extensions import TOKEN_SERVICE_KEY
from authsession.factory import create_app  # application factory under test
from authsession.infra.jwt.jwt_signer import JWTSigner
from authsession.infra.security.werkzeug_hasher import WerkzeugPasswordHasher
from authsession.services._shared.ports import InMemoryRefreshTokenStore
from authsession.services.tokens.service import TokenService
from tests.helpers.tokens import ACCESS_SECRET, REFRESH_SECRET


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Keeps refresh tokens in process memory; no Redis is contacted.
    - Uses a cheap password hash so sign-in tests stay fast.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REFRESH_STORE_BACKEND = "memory"
    LOG_LEVEL = "INFO"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by nested transactions in each test.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The outer SAVEPOINT keeps SQLite inside a real transaction; the session
    joins it in ``create_savepoint`` mode, so application code that commits
    (unit of work, SQL refresh store) only releases its own inner SAVEPOINT.
    """
    # 1) Top-level transaction plus an outer SAVEPOINT
    top_trans = connection.begin()
    connection.begin_nested()

    # 2) Scoped session joining the connection through inner SAVEPOINTs
    SessionFactory = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    scoped = scoped_session(SessionFactory)

    # 3) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(autouse=True)
def _reset_refresh_store(app):
    """Start every test with no active sessions in the app's memory store."""
    store = app.extensions[TOKEN_SERVICE_KEY].store
    if isinstance(store, InMemoryRefreshTokenStore):
        store.clear()
    yield


# -- Token lifecycle building blocks --------------------------------------------
@pytest.fixture()
def signer() -> JWTSigner:
    """Signer with the default 30 minute / 30 day lifetimes."""
    return JWTSigner(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(minutes=30),
        refresh_ttl=timedelta(days=30),
    )


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def token_service(signer, memory_store) -> TokenService:
    """TokenService wired to the in-memory store."""
    return TokenService(signer=signer, store=memory_store)


@pytest.fixture(scope="session")
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=TestConfig.PASSWORD_HASH_METHOD)


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
