from authsession.models.refresh_token import RefreshToken
from authsession.models.user import User

__all__ = [
    "RefreshToken",
    "User",
]
