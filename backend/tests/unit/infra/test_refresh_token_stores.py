# tests/unit/infra/test_refresh_token_stores.py
"""
Contract tests shared by every RefreshTokenStore backend.

Each test runs against the in-memory store, the Redis store (fakeredis) and
the SQLAlchemy store (transactional test session).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from authsession.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from authsession.infra.sqlalchemy.refresh_token_store import SQLAlchemyRefreshTokenStore
from authsession.services._shared.ports import InMemoryRefreshTokenStore, RefreshRecord


def _future(days: int = 30) -> datetime:
    return datetime.now(UTC) + timedelta(days=days)


@pytest.fixture(params=["memory", "redis", "sqlalchemy"])
def store(request, session):
    """Provide each store backend in turn."""
    if request.param == "memory":
        return InMemoryRefreshTokenStore()
    if request.param == "redis":
        return RedisRefreshTokenStore(r=fakeredis.FakeRedis())
    return SQLAlchemyRefreshTokenStore()


def test_save_then_find_both_ways(store):
    store.save("1", "rt-1", expires_at=_future())

    assert store.find_by_subject("1") == RefreshRecord(subject_id="1", refresh_token="rt-1")
    assert store.find_by_token("rt-1") == RefreshRecord(subject_id="1", refresh_token="rt-1")


def test_find_unknown_returns_none(store):
    assert store.find_by_subject("nobody") is None
    assert store.find_by_token("nothing") is None


def test_save_overwrites_single_slot(store):
    """A second save replaces the first; the old token is no longer findable."""
    store.save("1", "rt-1", expires_at=_future())
    store.save("1", "rt-2", expires_at=_future())

    record = store.find_by_subject("1")
    assert record is not None
    assert record.refresh_token == "rt-2"
    assert store.find_by_token("rt-1") is None
    assert store.find_by_token("rt-2").subject_id == "1"


def test_save_without_expiry(store):
    store.save("1", "rt-1")
    assert store.find_by_subject("1").refresh_token == "rt-1"


def test_subjects_are_isolated(store):
    store.save("a", "rt-a", expires_at=_future())
    store.save("b", "rt-b", expires_at=_future())

    assert store.find_by_subject("a").refresh_token == "rt-a"
    assert store.find_by_subject("b").refresh_token == "rt-b"
    assert store.replace("a", expected="rt-b", new="rt-x") is False
    assert store.find_by_subject("a").refresh_token == "rt-a"


def test_replace_swaps_expected_value(store):
    store.save("1", "rt-1", expires_at=_future())

    assert store.replace("1", expected="rt-1", new="rt-2", expires_at=_future()) is True
    assert store.find_by_subject("1").refresh_token == "rt-2"
    assert store.find_by_token("rt-1") is None
    assert store.find_by_token("rt-2").subject_id == "1"


def test_replace_refuses_stale_expected_value(store):
    """Second swap with the same expected value loses: the slot moved on."""
    store.save("1", "rt-1", expires_at=_future())
    assert store.replace("1", expected="rt-1", new="rt-2") is True

    assert store.replace("1", expected="rt-1", new="rt-3") is False
    assert store.find_by_subject("1").refresh_token == "rt-2"


def test_replace_without_session(store):
    assert store.replace("ghost", expected="rt-1", new="rt-2") is False
    assert store.find_by_subject("ghost") is None


def test_delete(store):
    store.save("1", "rt-1", expires_at=_future())

    assert store.delete("1") is True
    assert store.find_by_subject("1") is None
    assert store.find_by_token("rt-1") is None
    assert store.delete("1") is False
