from authsession.uow.base import UnitOfWork
from authsession.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyUnitOfWork"]
