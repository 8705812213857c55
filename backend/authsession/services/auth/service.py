# authsession/services/auth/service.py
"""
AuthService
===========

Auth flow around the token lifecycle:

- ``sign_up``: create the user record, then open a session.
- ``sign_in``: verify email + password, then open a session.
- ``refresh``: rotate the presented refresh token.
- ``logout``: drop the subject's refresh token.
- ``whoami``: resolve the subject of an access token to its public profile.

Identity checks are delegated to :class:`UserRepository` and the injected
:class:`PasswordHasher`; every token operation goes through
:class:`TokenService`.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from authsession.repositories.user import UserRepository
from authsession.services._shared.base import BaseService
from authsession.services._shared.errors import (
    EmailExistsError,
    EmailNotFoundError,
    InvalidPasswordError,
    NotFoundError,
    UnauthorizedError,
)
from authsession.services._shared.ports import PasswordHasher
from authsession.services.auth.dto import (
    AuthOut,
    RefreshIn,
    SignInIn,
    SignUpIn,
    UserPublicOut,
)
from authsession.services.tokens.service import TokenService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Application service for signup / signin / refresh / logout.

    The user record is committed before tokens are issued: the refresh store
    may run its own transaction and must only ever reference existing users.
    """

    def __init__(
        self,
        *,
        tokens: TokenService,
        hasher: PasswordHasher,
    ) -> None:
        """
        :param tokens: Token lifecycle service.
        :param hasher: Password hashing primitive.
        """
        super().__init__()
        self.tokens = tokens
        self.hasher = hasher

    # ------------------------------------------------------------------ #
    # Sign up
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> AuthOut:
        """
        Register a new account and issue its first token pair.

        :param dto: Sign-up input.
        :type dto: SignUpIn
        :returns: Token pair and new user id.
        :rtype: AuthOut
        :raises EmailExistsError: If the email is already registered.
        :raises InternalError: If tokens cannot be issued or stored.
        """
        password_hash = self.hasher.hash(dto.password)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise EmailExistsError(dto.email)

            try:
                user = repo.create(email=dto.email, password_hash=password_hash, name=dto.name)
            except IntegrityError as exc:
                # Concurrent sign-up with the same email won the unique index
                raise EmailExistsError(dto.email) from exc

            subject_id = user.subject_id

        log.info("auth.signup", extra={"subject": subject_id})
        return AuthOut(user_id=subject_id, tokens=self.tokens.issue(subject_id))

    # ------------------------------------------------------------------ #
    # Sign in
    # ------------------------------------------------------------------ #

    def sign_in(self, dto: SignInIn) -> AuthOut:
        """
        Verify credentials and issue a new token pair.

        Any session previously held by the user is replaced.

        :raises EmailNotFoundError: No account for ``dto.email``.
        :raises InvalidPasswordError: Password does not match.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                raise EmailNotFoundError()
            if not self.hasher.compare(dto.password, user.password_hash):
                raise InvalidPasswordError()
            subject_id = user.subject_id

        log.info("auth.signin", extra={"subject": subject_id})
        return AuthOut(user_id=subject_id, tokens=self.tokens.issue(subject_id))

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthOut:
        """
        Exchange a refresh token for a new pair.

        :raises UnauthorizedError: If the token is invalid, stale or lost a
            concurrent rotation.
        """
        pair = self.tokens.rotate(dto.refresh_token)
        return AuthOut(user_id=pair.subject_id, tokens=pair)

    def logout(self, subject_id: str) -> bool:
        """End the session of ``subject_id``; returns ``False`` if none was active."""
        return self.tokens.revoke(subject_id)

    # ------------------------------------------------------------------ #
    # Who am I
    # ------------------------------------------------------------------ #

    def whoami(self, subject_id: str) -> UserPublicOut:
        """
        Return the public profile of the token subject.

        :raises UnauthorizedError: If the subject is not a user id.
        :raises NotFoundError: If the user no longer exists.
        """
        try:
            user_id = int(subject_id)
        except (TypeError, ValueError):
            raise UnauthorizedError() from None

        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut(id=user.id, email=user.email, name=user.name)
