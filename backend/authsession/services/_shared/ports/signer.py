from __future__ import annotations

from datetime import timedelta
from typing import Protocol


class TokenSigner(Protocol):
    """
    Port for issuing and verifying signed, time-bound tokens.

    Access and refresh tokens are signed with independent secrets so that a
    leaked access secret cannot be used to forge refresh tokens.
    """

    refresh_ttl: timedelta

    @property
    def access_expires_in(self) -> int:
        """Lifetime of access tokens in seconds."""
        ...

    def issue_access(self, subject_id: str, *, fresh: bool = False) -> str: ...

    def issue_refresh(self, subject_id: str) -> str: ...

    def verify_access(self, token: str) -> str:
        """
        Return the embedded subject of a valid access token.

        :raises MalformedTokenError: Token cannot be parsed.
        :raises SignatureInvalidError: Signature mismatch.
        :raises TokenExpiredError: Token past its expiry.
        """
        ...

    def verify_refresh(self, token: str) -> str:
        """
        Return the embedded subject of a valid refresh token.

        Callers must not trust the subject alone; the refresh store decides
        whether the token is still the live one.
        """
        ...
