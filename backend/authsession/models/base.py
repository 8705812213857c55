"""Column mixins shared by the ORM models (SQLAlchemy 2.0 typed mappings)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


def _timestamp(*, on_update: bool = False) -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now() if on_update else None,
    )


class TimestampMixin:
    """``created_at`` / ``updated_at`` columns maintained by the database clock."""

    created_at: Mapped[datetime] = _timestamp()
    updated_at: Mapped[datetime] = _timestamp(on_update=True)


class PKMixin:
    """Integer surrogate primary key ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    """``<ClassName key=value>`` repr; ``__repr_key__`` names the identifying attribute."""

    __repr_key__ = "id"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.__repr_key__}={getattr(self, self.__repr_key__, None)}>"
