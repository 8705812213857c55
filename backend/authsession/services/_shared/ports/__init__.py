"""
authsession.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing, refresh-token persistence and password hashing.

These ports decouple the service layer from concrete implementations.

Modules
-------
- :mod:`signer`:
    Defines :class:`~.TokenSigner`, the abstraction for issuing and verifying
    access/refresh tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshRecord`, the
    single-slot-per-subject refresh token persistence contract, plus the
    :class:`~.InMemoryRefreshTokenStore` used in tests and development.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: hash/compare over plain passwords.

Design Notes
------------
Concrete adapters (Redis, SQLAlchemy, PyJWT, werkzeug) live under
``authsession.infra``.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .refresh_token_store import InMemoryRefreshTokenStore, RefreshRecord, RefreshTokenStore
from .signer import TokenSigner

__all__ = [
    "TokenSigner",
    "RefreshTokenStore",
    "RefreshRecord",
    "InMemoryRefreshTokenStore",
    "PasswordHasher",
]
