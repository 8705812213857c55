"""Token lifecycle package (issue / rotate / verify / revoke)."""

from .dto import TokenPair
from .service import TokenService

__all__ = ["TokenPair", "TokenService"]
