"""User account model."""

from __future__ import annotations

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from authsession.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address."""
    return value.strip().lower()


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account record owned by the auth flow.

    The token lifecycle only ever reads ``id`` (the subject identifier).

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed), unique.
    password_hash : str
        Output of the configured password hasher. Never the raw password.
    name : str | None
        Optional display name.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    @property
    def subject_id(self) -> str:
        """Subject identifier embedded in tokens."""
        return str(self.id)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and sanity-check the email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = normalize_email(value)
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v
