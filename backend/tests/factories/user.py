"""Factory Boy definition for :class:`authsession.models.user.User`."""

from __future__ import annotations

import factory

from authsession.infra.security.werkzeug_hasher import WerkzeugPasswordHasher
from authsession.models.user import User
from tests.factories import BaseFactory

# Matches TestingConfig.PASSWORD_HASH_METHOD
_HASHER = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


class UserFactory(BaseFactory):
    """
    Build persisted :class:`User` instances.

    Pass ``password=...`` to choose the raw password; only its hash is stored.
    """

    class Meta:
        model = User

    class Params:
        password = "Passw0rd!"

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Sequence(lambda n: f"User {n}")
    password_hash = factory.LazyAttribute(lambda o: _HASHER.hash(o.password))
