# authsession/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access/refresh token pair handed to the client.

    :param subject_id: Subject both tokens were issued for.
    :type subject_id: str
    :param access_token: Short-lived signed access JWT.
    :type access_token: str
    :param refresh_token: Long-lived signed refresh JWT; the only value the
        refresh store will accept for the next rotation.
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    """

    subject_id: str
    access_token: str
    refresh_token: str
    expires_in: int
