# authsession/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from authsession.services.tokens.dto import TokenPair

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """
    Input DTO for account creation.

    :param email: User email (normalized by the repository).
    :type email: str
    :param password: Raw password (hashed before persistence).
    :type password: str
    :param name: Optional display name.
    :type name: str | None
    """

    email: str
    password: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class SignInIn:
    """
    Input DTO for password sign-in.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Output DTO returned by signup, signin and refresh.

    :param user_id: Identifier of the authenticated user.
    :type user_id: str
    :param tokens: Newly issued token pair.
    :type tokens: TokenPair
    """

    user_id: str
    tokens: TokenPair


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public-safe user payload (no password hash)."""

    id: int
    email: str
    name: str | None
