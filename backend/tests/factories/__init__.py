"""Factory Boy base wiring factories to the per-test SQLAlchemy session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session installed by the ``session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered session.

        :raises RuntimeError: If a factory runs outside the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("Factory session not set; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Persist factory objects by flushing into the transactional session."""

    class Meta:
        abstract = True
        # Callable so the session is resolved per object, not at import time
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
