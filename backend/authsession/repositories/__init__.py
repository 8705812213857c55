"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from authsession.repositories.base import BaseRepository
from authsession.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
