"""Generic repository base for SQLAlchemy 2.x.

Repositories stay thin and persistence-focused:

- They never implement use cases or domain policies.
- They never call commit/rollback; the Unit of Work owns transactions.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy.orm import Session

from authsession.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Minimal typed repository bound to a SQLAlchemy session.

    :param session: Session to use; defaults to the Flask-scoped ``db.session``
        resolved at call time.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return cast(Session, self._session if self._session is not None else db.session)

    def get(self, pk: Any) -> E | None:
        """Fetch an entity by primary key."""
        return self.session.get(self.model, pk)

    def add(self, entity: E) -> E:
        """Stage an entity and flush so database defaults (ids) are populated."""
        self.session.add(entity)
        self.flush()
        return entity

    def flush(self) -> None:
        self.session.flush()
