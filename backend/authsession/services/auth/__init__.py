"""Auth flow package (signup / signin / refresh / logout / whoami)."""

from .dto import AuthOut, RefreshIn, SignInIn, SignUpIn, UserPublicOut
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthOut",
    "RefreshIn",
    "SignInIn",
    "SignUpIn",
    "UserPublicOut",
]
