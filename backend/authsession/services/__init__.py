"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`authsession.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``authsession.services._shared.base``)
    * :class:`BaseService`

- Token lifecycle (from ``authsession.services.tokens``)
    * :class:`TokenService`
    * DTO: :class:`TokenPair`

- Auth flow (from ``authsession.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`SignUpIn`, :class:`SignInIn`, :class:`RefreshIn`,
      :class:`AuthOut`, :class:`UserPublicOut`
"""

from __future__ import annotations

from authsession.services._shared.base import BaseService
from authsession.services.auth import (
    AuthOut,
    AuthService,
    RefreshIn,
    SignInIn,
    SignUpIn,
    UserPublicOut,
)
from authsession.services.tokens import TokenPair, TokenService

__all__ = [
    "BaseService",
    "TokenService",
    "TokenPair",
    "AuthService",
    "AuthOut",
    "RefreshIn",
    "SignInIn",
    "SignUpIn",
    "UserPublicOut",
]
