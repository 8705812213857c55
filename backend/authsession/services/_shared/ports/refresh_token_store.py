from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class RefreshRecord:
    """
    Read-model for the single active refresh token of a subject.

    :ivar subject_id: Owner subject identifier (unique key).
    :ivar refresh_token: The most recently issued refresh token value.
    """

    subject_id: str
    refresh_token: str


class RefreshTokenStore(Protocol):
    """
    Single source of truth for "which refresh token is currently valid for X".

    At most one record exists per subject. Writes MUST be atomic per key and
    :meth:`replace` MUST be an atomic compare-and-swap.
    """

    def save(
        self, subject_id: str, refresh_token: str, *, expires_at: datetime | None = None
    ) -> None:
        """Upsert the record for ``subject_id`` (last write wins)."""

    def find_by_subject(self, subject_id: str) -> RefreshRecord | None:
        """Return the record for ``subject_id`` if present."""

    def find_by_token(self, refresh_token: str) -> RefreshRecord | None:
        """Return the record currently holding ``refresh_token`` if present."""

    def replace(
        self,
        subject_id: str,
        *,
        expected: str,
        new: str,
        expires_at: datetime | None = None,
    ) -> bool:
        """
        Atomically swap ``expected`` for ``new``.

        :returns: ``False`` when the stored value is no longer ``expected``.
        """

    def delete(self, subject_id: str) -> bool:
        """Remove the record. :returns: True if it existed."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store.

    .. note::
       Uses a threading lock to make upsert and swap atomic within a process.
    """

    def __init__(self) -> None:
        self._by_subject: dict[str, str] = {}
        self._by_token: dict[str, str] = {}
        self._lock = threading.Lock()

    def _put(self, subject_id: str, refresh_token: str) -> None:
        old = self._by_subject.get(subject_id)
        if old is not None:
            self._by_token.pop(old, None)
        self._by_subject[subject_id] = refresh_token
        self._by_token[refresh_token] = subject_id

    def save(
        self, subject_id: str, refresh_token: str, *, expires_at: datetime | None = None
    ) -> None:
        with self._lock:
            self._put(subject_id, refresh_token)

    def find_by_subject(self, subject_id: str) -> RefreshRecord | None:
        with self._lock:
            token = self._by_subject.get(subject_id)
        if token is None:
            return None
        return RefreshRecord(subject_id=subject_id, refresh_token=token)

    def find_by_token(self, refresh_token: str) -> RefreshRecord | None:
        with self._lock:
            subject_id = self._by_token.get(refresh_token)
        if subject_id is None:
            return None
        return RefreshRecord(subject_id=subject_id, refresh_token=refresh_token)

    def replace(
        self,
        subject_id: str,
        *,
        expected: str,
        new: str,
        expires_at: datetime | None = None,
    ) -> bool:
        with self._lock:
            if self._by_subject.get(subject_id) != expected:
                return False
            self._put(subject_id, new)
            return True

    def delete(self, subject_id: str) -> bool:
        with self._lock:
            token = self._by_subject.pop(subject_id, None)
            if token is None:
                return False
            self._by_token.pop(token, None)
            return True

    def clear(self) -> None:
        """Drop every record (used between tests and in development resets)."""
        with self._lock:
            self._by_subject.clear()
            self._by_token.clear()

    def __len__(self) -> int:
        return len(self._by_subject)
