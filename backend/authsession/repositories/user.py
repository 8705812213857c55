"""User repository: the user-store collaborator of the auth flow."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authsession.models.user import User, normalize_email
from authsession.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER handles tokens or password hashing, only DB-level user records.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def create(self, *, email: str, password_hash: str, name: str | None = None) -> User:
        """Insert a new user and flush to obtain its identifier.

        :raises sqlalchemy.exc.IntegrityError: When the email is already taken.
        """
        return self.add(User(email=email, password_hash=password_hash, name=name))
