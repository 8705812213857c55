"""
Unit tests for SQLAlchemyUnitOfWork, using factories.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from authsession.models import User
from authsession.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


def _count_users(session) -> int:
    return session.execute(select(func.count(User.id))).scalar_one()


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_success(self, session):
        """
        GIVEN a UoW
        WHEN a user is added through its repository and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = _count_users(session)

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert _count_users(session) == initial + 1

    def test_rolls_back_on_exception(self, session):
        """
        GIVEN a UoW
        WHEN an exception is raised inside the block
        THEN nothing is persisted and the exception propagates.
        """
        initial = _count_users(session)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert _count_users(session) == initial

    def test_repositories_share_the_uow_session(self, session):
        uow = SQLAlchemyUnitOfWork()
        assert uow.users.session is uow.session
