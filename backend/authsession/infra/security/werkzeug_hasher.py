from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from authsession.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hasher backed by :mod:`werkzeug.security`.

    :param method: Hash method understood by ``generate_password_hash``
        (e.g. ``"scrypt"`` or ``"pbkdf2:sha256:600000"``).
    """

    method: str = "scrypt"

    def hash(self, plain: str) -> str:
        if not isinstance(plain, str) or not plain:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(plain, method=self.method)

    def compare(self, plain: str, hashed: str) -> bool:
        if not hashed:
            return False
        # ``check_password_hash`` is untyped; coerce to bool for mypy.
        return bool(check_password_hash(hashed, plain))
