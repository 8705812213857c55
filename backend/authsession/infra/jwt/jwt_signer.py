# authsession/infra/jwt/jwt_signer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from authsession.services._shared.errors import (
    MalformedTokenError,
    SignatureInvalidError,
    SigningError,
    TokenExpiredError,
)
from authsession.services._shared.ports import TokenSigner

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti", "type"]


@dataclass(slots=True)
class JWTSigner(TokenSigner):
    """
    PyJWT adapter issuing HMAC-signed access and refresh tokens.

    Access tokens carry the claim layout Flask-JWT-Extended expects
    (``sub``/``type``/``fresh``/``jti``), so ``verify_jwt_in_request`` accepts
    them when ``JWT_SECRET_KEY`` equals :attr:`access_secret`.

    :param access_secret: HMAC secret for access tokens.
    :param refresh_secret: Distinct HMAC secret for refresh tokens.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param algorithm: JWS algorithm (HS256 by default).
    :param leeway: Clock skew tolerance applied when verifying.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=30)
    refresh_ttl: timedelta = timedelta(days=30)
    algorithm: str = "HS256"
    leeway: timedelta = timedelta(seconds=0)

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Both access and refresh secrets are required.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")
        if self.refresh_ttl <= self.access_ttl:
            raise ValueError("Refresh token lifetime must exceed the access token lifetime.")

    # -------------------- issuing --------------------

    @property
    def access_expires_in(self) -> int:
        return int(self.access_ttl.total_seconds())

    def _encode(self, claims: dict[str, Any], secret: str) -> str:
        try:
            return jwt.encode(claims, secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError(f"Unable to sign {claims.get('type')} token") from exc

    def _claims(self, subject_id: str, ttype: str, ttl: timedelta) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(subject_id),
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            # jti keeps two pairs minted within the same second distinct
            "jti": uuid4().hex,
            "type": ttype,
        }

    def issue_access(self, subject_id: str, *, fresh: bool = False) -> str:
        claims = self._claims(subject_id, ACCESS_TOKEN_TYPE, self.access_ttl)
        claims["fresh"] = fresh
        return self._encode(claims, self.access_secret)

    def issue_refresh(self, subject_id: str) -> str:
        claims = self._claims(subject_id, REFRESH_TOKEN_TYPE, self.refresh_ttl)
        return self._encode(claims, self.refresh_secret)

    # -------------------- verifying --------------------

    def _decode(self, token: str, *, secret: str, expected_type: str) -> dict[str, Any]:
        # compact JWS is base64url segments; anything non-ASCII cannot be one
        if not isinstance(token, str) or not token.isascii() or token.count(".") != 2:
            raise MalformedTokenError("Token is not a compact JWS")
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except jwt.InvalidSignatureError as exc:
            # must precede DecodeError, its base class
            raise SignatureInvalidError("Signature mismatch") from exc
        except (jwt.InvalidTokenError, UnicodeError) as exc:
            raise MalformedTokenError(str(exc)) from exc

        if payload.get("type") != expected_type:
            raise MalformedTokenError(f"Expected a {expected_type} token")
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token subject is missing")
        return payload

    def verify_access(self, token: str) -> str:
        payload = self._decode(token, secret=self.access_secret, expected_type=ACCESS_TOKEN_TYPE)
        return str(payload["sub"])

    def verify_refresh(self, token: str) -> str:
        payload = self._decode(token, secret=self.refresh_secret, expected_type=REFRESH_TOKEN_TYPE)
        return str(payload["sub"])
