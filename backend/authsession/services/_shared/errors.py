"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between the token
lifecycle core, repositories and application services.

The translation to HTTP responses (RFC 7807) is handled by
``authsession/core/errors.py`` via ``BaseService.translate_exceptions()``.

Hierarchy
---------
- :class:`ServiceError`
    - :class:`TokenVerificationError` (never leaves the token service)
        - :class:`MalformedTokenError`
        - :class:`SignatureInvalidError`
        - :class:`TokenExpiredError`
    - :class:`UnauthorizedError`
    - :class:`InternalError`
        - :class:`SigningError`
        - :class:`StoreUnavailableError`
    - :class:`ConflictError`
        - :class:`EmailExistsError`
    - :class:`InvalidCredentialsError`
        - :class:`EmailNotFoundError`
        - :class:`InvalidPasswordError`
    - :class:`NotFoundError`
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer or BaseService will later translate them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Token verification (signer level)
# --------------------------------------------------------------------------- #


class TokenVerificationError(ServiceError):
    """Raised by a signer when a presented token cannot be trusted."""


class MalformedTokenError(TokenVerificationError):
    """The token cannot be parsed into the expected structure."""


class SignatureInvalidError(TokenVerificationError):
    """The signature does not match (tampered token or wrong secret)."""


class TokenExpiredError(TokenVerificationError):
    """The token is past its ``exp`` claim."""


# --------------------------------------------------------------------------- #
# Token service level
# --------------------------------------------------------------------------- #


class UnauthorizedError(ServiceError):
    """
    Umbrella rejection for the rotate/verify paths.

    The message is deliberately generic; the concrete reason is only logged.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    """Store or signing infrastructure failure. Not recoverable by the client."""


class SigningError(InternalError):
    """A token could not be encoded."""


class StoreUnavailableError(InternalError):
    """The refresh token store backend failed or timed out."""


# --------------------------------------------------------------------------- #
# Auth flow errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class EmailExistsError(ConflictError):
    """Sign-up attempted with an email that is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__("User", f"email already registered: {email}")


class InvalidCredentialsError(ServiceError):
    """Base class for password sign-in failures."""


class EmailNotFoundError(InvalidCredentialsError):
    """No account is registered for the given email."""


class InvalidPasswordError(InvalidCredentialsError):
    """The password does not match the stored hash."""
