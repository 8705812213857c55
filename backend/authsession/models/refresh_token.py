"""Persisted refresh token slot: one row per subject."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from authsession.core.extensions import db

from .base import ReprMixin, TimestampMixin


class RefreshToken(ReprMixin, TimestampMixin, db.Model):
    """
    Current refresh token of a subject.

    ``subject_id`` is the primary key, so the table can never hold two active
    tokens for the same subject; issuing or rotating overwrites the row.
    ``refresh_token`` is uniquely indexed for lookups by token value.
    """

    __tablename__ = "refresh_tokens"
    __repr_key__ = "subject_id"

    subject_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    refresh_token: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True, index=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
