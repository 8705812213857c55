"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    RefreshSchema,
    SignInSchema,
    SignUpSchema,
    TokenResponseSchema,
    WhoAmISchema,
)

__all__ = [
    "SignUpSchema",
    "SignInSchema",
    "RefreshSchema",
    "TokenResponseSchema",
    "WhoAmISchema",
]
