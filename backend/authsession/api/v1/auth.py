"""Authentication endpoints: signup, signin, token refresh, logout, whoami."""

from __future__ import annotations

from flask import Blueprint

from authsession.api.deps import (
    auth_service,
    current_subject,
    json_body,
    json_response,
    require_auth,
    service_errors,
    timing,
)
from authsession.schemas import (
    RefreshSchema,
    SignInSchema,
    SignUpSchema,
    TokenResponseSchema,
    WhoAmISchema,
)
from authsession.services.auth.dto import AuthOut, RefreshIn, SignInIn, SignUpIn

bp = Blueprint("auth", __name__)

signup_schema = SignUpSchema()
signin_schema = SignInSchema()
refresh_schema = RefreshSchema()
token_schema = TokenResponseSchema()
whoami_schema = WhoAmISchema()


def _token_body(out: AuthOut) -> dict:
    pair = out.tokens
    return {
        "data": token_schema.dump(
            {
                "access_token": pair.access_token,
                "refresh_token": pair.refresh_token,
                "expires_in": pair.expires_in,
                "user_id": out.user_id,
            }
        )
    }


@bp.post("/signup")
@timing
@service_errors
def signup():
    """Create an account and return its first token pair."""

    data = signup_schema.load(json_body())
    out = auth_service().sign_up(SignUpIn(**data))
    return json_response(_token_body(out), status=201)


@bp.post("/signin")
@timing
@service_errors
def signin():
    """Authenticate email + password and issue a new token pair."""

    data = signin_schema.load(json_body())
    out = auth_service().sign_in(SignInIn(**data))
    return json_response(_token_body(out))


@bp.post("/token")
@timing
@service_errors
def token():
    """Rotate a refresh token into a new pair."""

    data = refresh_schema.load(json_body())
    out = auth_service().refresh(RefreshIn(**data))
    return json_response(_token_body(out))


@bp.post("/logout")
@require_auth
@timing
@service_errors
def logout():
    """Drop the caller's refresh token; the access token lives until expiry."""

    auth_service().logout(current_subject())
    return "", 204


@bp.get("/whoami")
@require_auth
@timing
@service_errors
def whoami():
    """Return the authenticated user profile."""

    user = auth_service().whoami(current_subject())
    return json_response({"data": whoami_schema.dump(user)})
