from authsession.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

__all__ = ["RedisRefreshTokenStore"]
