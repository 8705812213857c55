# comments in English; reST docstrings
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from authsession.services._shared.errors import StoreUnavailableError
from authsession.services._shared.ports import RefreshRecord, RefreshTokenStore


def _s(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store, one slot per subject.

    Layout
    ------
    - ``rt:s:{subject}`` → current refresh token.
    - ``rt:t:{sha256(token)}`` → subject (reverse index for token lookups).

    Both keys expire with the refresh token when ``expires_at`` is given.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _ks(subject_id: str) -> str:
        return f"rt:s:{subject_id}"

    @staticmethod
    def _kt(refresh_token: str) -> str:
        digest = hashlib.sha256(refresh_token.encode("utf-8")).hexdigest()
        return f"rt:t:{digest}"

    @staticmethod
    def _ttl(expires_at: datetime | None) -> int | None:
        if expires_at is None:
            return None
        now = datetime.now(UTC).timestamp()
        return max(1, int(expires_at.replace(tzinfo=expires_at.tzinfo or UTC).timestamp() - now))

    def _queue_put(
        self,
        p,
        subject_id: str,
        refresh_token: str,
        old_token: str | None,
        ttl: int | None,
    ) -> None:
        if old_token is not None and old_token != refresh_token:
            p.delete(self._kt(old_token))
        p.set(self._ks(subject_id), refresh_token, ex=ttl)
        p.set(self._kt(refresh_token), subject_id, ex=ttl)

    # -------------------- API ------------------------

    def save(
        self, subject_id: str, refresh_token: str, *, expires_at: datetime | None = None
    ) -> None:
        """
        Upsert the subject's slot and its reverse-index entry in one transaction.

        The subject key is WATCHed so that the stale reverse entry of a racing
        writer is always cleaned up.
        """
        k_subject = self._ks(subject_id)
        ttl = self._ttl(expires_at)
        try:
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(k_subject)
                        old = _s(p.get(k_subject))
                        p.multi()
                        self._queue_put(p, subject_id, refresh_token, old, ttl)
                        p.execute()
                    return
                except redis.WatchError:
                    # Concurrent writer on the same subject; retry
                    continue
        except RedisError as exc:
            raise StoreUnavailableError("Refresh token store unavailable") from exc

    def find_by_subject(self, subject_id: str) -> RefreshRecord | None:
        try:
            token = _s(self.r.get(self._ks(subject_id)))
        except RedisError as exc:
            raise StoreUnavailableError("Refresh token store unavailable") from exc
        if token is None:
            return None
        return RefreshRecord(subject_id=subject_id, refresh_token=token)

    def find_by_token(self, refresh_token: str) -> RefreshRecord | None:
        try:
            subject_id = _s(self.r.get(self._kt(refresh_token)))
            if subject_id is None:
                return None
            # reverse entry may lag behind a concurrent overwrite
            current = _s(self.r.get(self._ks(subject_id)))
        except RedisError as exc:
            raise StoreUnavailableError("Refresh token store unavailable") from exc
        if current != refresh_token:
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
        """
        Atomically swap ``expected`` for ``new`` using WATCH/MULTI/EXEC.

        A concurrent modification of the subject slot aborts the transaction;
        the loop then re-reads and, since the slot no longer holds
        ``expected``, reports the lost race.
        """
        k_subject = self._ks(subject_id)
        ttl = self._ttl(expires_at)
        try:
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(k_subject)
                        current = _s(p.get(k_subject))
                        if current != expected:
                            p.unwatch()
                            return False
                        p.multi()
                        self._queue_put(p, subject_id, new, current, ttl)
                        p.execute()
                    return True
                except redis.WatchError:
                    continue
        except RedisError as exc:
            raise StoreUnavailableError("Refresh token store unavailable") from exc

    def delete(self, subject_id: str) -> bool:
        k_subject = self._ks(subject_id)
        try:
            while True:
                try:
                    with self.r.pipeline() as p:
                        p.watch(k_subject)
                        current = _s(p.get(k_subject))
                        if current is None:
                            p.unwatch()
                            return False
                        p.multi()
                        p.delete(k_subject)
                        p.delete(self._kt(current))
                        p.execute()
                    return True
                except redis.WatchError:
                    continue
        except RedisError as exc:
            raise StoreUnavailableError("Refresh token store unavailable") from exc
