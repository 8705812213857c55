from authsession.infra.sqlalchemy.refresh_token_store import SQLAlchemyRefreshTokenStore

__all__ = ["SQLAlchemyRefreshTokenStore"]
