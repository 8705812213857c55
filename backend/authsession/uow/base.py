"""
Unit of Work contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from authsession.repositories.user import UserRepository


class UnitOfWork(ABC):
    """
    Transaction boundary of one auth-flow use case.

    Repositories exposed here share the transaction; leaving the ``with``
    block cleanly commits it, leaving it with an exception rolls it back.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
