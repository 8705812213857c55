from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port over the password-hashing primitive (hash / compare only)."""

    def hash(self, plain: str) -> str: ...

    def compare(self, plain: str, hashed: str) -> bool: ...
