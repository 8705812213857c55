# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from authsession.core.extensions import db
from authsession.models.refresh_token import RefreshToken
from authsession.services._shared.errors import StoreUnavailableError
from authsession.services._shared.ports import RefreshRecord, RefreshTokenStore


def _default_session() -> Session:
    return db.session


class SQLAlchemyRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh token store (table ``refresh_tokens``).

    Every write commits its own short transaction; the token service never
    shares a transaction with the store. Atomicity comes from the database:

    - ``save`` updates the row in place and falls back to an INSERT, retrying
      as an UPDATE if a concurrent writer inserted first (PK collision).
    - ``replace`` is a single ``UPDATE ... WHERE subject_id = :s AND
      refresh_token = :expected``; exactly one concurrent caller can match.

    :param session_factory: Returns the session to use; defaults to the
        Flask-scoped ``db.session`` resolved at call time.
    """

    def __init__(self, session_factory: Callable[[], Session] = _default_session) -> None:
        self._session_factory = session_factory

    # -------------------- helpers --------------------

    def _run(self, op: Callable[[Session], object]):
        session = self._session_factory()
        try:
            result = op(session)
            session.commit()
            return result
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreUnavailableError("Refresh token store unavailable") from exc

    @staticmethod
    def _update(session: Session, subject_id: str, token: str, expires_at: datetime | None) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.subject_id == subject_id)
            .values(refresh_token=token, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        return session.execute(stmt).rowcount or 0

    # -------------------- API ------------------------

    def save(
        self, subject_id: str, refresh_token: str, *, expires_at: datetime | None = None
    ) -> None:
        def _upsert(session: Session) -> None:
            if self._update(session, subject_id, refresh_token, expires_at):
                return
            try:
                with session.begin_nested():
                    session.add(
                        RefreshToken(
                            subject_id=subject_id,
                            refresh_token=refresh_token,
                            expires_at=expires_at,
                        )
                    )
            except IntegrityError:
                # Lost an insert race for the same subject: last write wins
                self._update(session, subject_id, refresh_token, expires_at)

        self._run(_upsert)

    def find_by_subject(self, subject_id: str) -> RefreshRecord | None:
        stmt = select(RefreshToken.refresh_token).where(RefreshToken.subject_id == subject_id)
        token = self._run(lambda s: s.execute(stmt).scalar_one_or_none())
        if token is None:
            return None
        return RefreshRecord(subject_id=subject_id, refresh_token=str(token))

    def find_by_token(self, refresh_token: str) -> RefreshRecord | None:
        stmt = select(RefreshToken.subject_id).where(RefreshToken.refresh_token == refresh_token)
        subject_id = self._run(lambda s: s.execute(stmt).scalar_one_or_none())
        if subject_id is None:
            return None
        return RefreshRecord(subject_id=str(subject_id), refresh_token=refresh_token)

    def replace(
        self,
        subject_id: str,
        *,
        expected: str,
        new: str,
        expires_at: datetime | None = None,
    ) -> bool:
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.subject_id == subject_id,
                RefreshToken.refresh_token == expected,
            )
            .values(refresh_token=new, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        rowcount = self._run(lambda s: s.execute(stmt).rowcount)
        return rowcount == 1

    def delete(self, subject_id: str) -> bool:
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.subject_id == subject_id)
            .execution_options(synchronize_session=False)
        )
        rowcount = self._run(lambda s: s.execute(stmt).rowcount)
        return rowcount == 1
