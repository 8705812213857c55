# authsession/services/tokens/service.py
"""
Token lifecycle: issue, rotate, verify and revoke session token pairs.

Each subject has a single-slot session state::

    NoSession --issue--> Active(r1) --rotate(r1)--> Active(r2) --revoke--> NoSession

``issue`` always overwrites the slot. ``rotate`` only succeeds for the exact
refresh token currently held in the slot, which makes every refresh token
single-use: once rotated, the old value is gone from the store and any replay
is rejected.
"""

from __future__ import annotations

import hmac
import logging
from datetime import UTC, datetime

from authsession.services._shared.errors import (
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenVerificationError,
    UnauthorizedError,
)
from authsession.services._shared.ports import RefreshTokenStore, TokenSigner
from authsession.services.tokens.dto import TokenPair

log = logging.getLogger(__name__)

# Internal audit labels for rejected rotations; never sent to clients.
REASON_MALFORMED = "malformed"
REASON_SIGNATURE = "signature_invalid"
REASON_EXPIRED = "expired"
REASON_NO_SESSION = "no_session"
REASON_STALE = "stale_token"
REASON_LOST_RACE = "lost_race"


def _reason_for(exc: TokenVerificationError) -> str:
    if isinstance(exc, TokenExpiredError):
        return REASON_EXPIRED
    if isinstance(exc, SignatureInvalidError):
        return REASON_SIGNATURE
    if isinstance(exc, MalformedTokenError):
        return REASON_MALFORMED
    return type(exc).__name__


class TokenService:
    """
    Orchestrates a :class:`TokenSigner` and a :class:`RefreshTokenStore`.

    Failure semantics
    -----------------
    - Every verification failure on ``rotate``/``verify_access`` surfaces as
      :class:`UnauthorizedError` with a generic message; the concrete reason
      is only logged.
    - Store and signing failures propagate as
      :class:`~authsession.services._shared.errors.InternalError` subclasses.
    - Nothing is retried here. A failed rotation must be followed by a new
      sign-in.
    """

    def __init__(self, *, signer: TokenSigner, store: RefreshTokenStore) -> None:
        """
        :param signer: Issues and verifies access/refresh JWTs.
        :param store: Single-slot-per-subject refresh token persistence.
        """
        self.signer = signer
        self.store = store

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def _mint(self, subject_id: str, *, fresh: bool) -> TokenPair:
        return TokenPair(
            subject_id=subject_id,
            access_token=self.signer.issue_access(subject_id, fresh=fresh),
            refresh_token=self.signer.issue_refresh(subject_id),
            expires_in=self.signer.access_expires_in,
        )

    def _refresh_expires_at(self) -> datetime:
        return datetime.now(UTC) + self.signer.refresh_ttl

    def issue(self, subject_id: str | int) -> TokenPair:
        """
        Start (or restart) the session of ``subject_id``.

        Signs a new pair and overwrites the stored refresh token, whatever it
        held before.

        :returns: The new token pair.
        :raises InternalError: On signing or store failure.
        """
        subject = str(subject_id)
        pair = self._mint(subject, fresh=True)
        self.store.save(subject, pair.refresh_token, expires_at=self._refresh_expires_at())
        log.info("token.issued", extra={"subject": subject})
        return pair

    # ------------------------------------------------------------------ #
    # Rotate
    # ------------------------------------------------------------------ #

    def _reject(self, reason: str, subject: str | None = None) -> UnauthorizedError:
        log.warning("token.rotate.rejected", extra={"subject": subject, "reason": reason})
        return UnauthorizedError()

    def rotate(self, presented_refresh_token: str) -> TokenPair:
        """
        Exchange the currently active refresh token for a new pair.

        Steps
        -----
        1. Verify signature, expiry and structure; derive the subject.
        2. Load the stored record of that subject.
        3. Require the stored value to equal the presented token.
        4. Sign a new pair and compare-and-swap it into the store.

        :raises UnauthorizedError: On any verification failure, a missing
            session, a stale (already rotated) token, or a lost race against
            a concurrent rotation of the same token.
        :raises InternalError: On signing or store failure.
        """
        try:
            subject = self.signer.verify_refresh(presented_refresh_token)
        except TokenVerificationError as exc:
            raise self._reject(_reason_for(exc)) from None

        record = self.store.find_by_subject(subject)
        if record is None:
            raise self._reject(REASON_NO_SESSION, subject)

        if not hmac.compare_digest(
            record.refresh_token.encode("utf-8"), presented_refresh_token.encode("utf-8")
        ):
            raise self._reject(REASON_STALE, subject)

        pair = self._mint(subject, fresh=False)
        swapped = self.store.replace(
            subject,
            expected=presented_refresh_token,
            new=pair.refresh_token,
            expires_at=self._refresh_expires_at(),
        )
        if not swapped:
            raise self._reject(REASON_LOST_RACE, subject)

        log.info("token.rotated", extra={"subject": subject})
        return pair

    # ------------------------------------------------------------------ #
    # Access verification / revocation
    # ------------------------------------------------------------------ #

    def verify_access(self, access_token: str) -> str:
        """
        Return the subject of a valid access token.

        Protected HTTP routes check the same token through Flask-JWT-Extended
        (:func:`authsession.api.deps.require_auth`), which shares the access
        secret and claim layout with the signer; both accept and refuse the
        same tokens. This method serves callers outside a Flask request.

        :raises UnauthorizedError: If the token is malformed, forged or expired.
        """
        try:
            return self.signer.verify_access(access_token)
        except TokenVerificationError as exc:
            log.info("token.access.rejected", extra={"reason": _reason_for(exc)})
            raise UnauthorizedError() from None

    def revoke(self, subject_id: str | int) -> bool:
        """
        End the session of ``subject_id`` by clearing its stored refresh token.

        Outstanding access tokens stay valid until they expire.

        :returns: ``True`` if a session existed.
        """
        subject = str(subject_id)
        removed = self.store.delete(subject)
        log.info("token.revoked", extra={"subject": subject, "status": removed})
        return removed

    def session_of(self, refresh_token: str) -> str | None:
        """Return the subject whose live refresh token is ``refresh_token``, if any."""
        record = self.store.find_by_token(refresh_token)
        return record.subject_id if record is not None else None
