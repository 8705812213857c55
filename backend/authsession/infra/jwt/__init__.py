from authsession.infra.jwt.jwt_signer import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, JWTSigner

__all__ = ["JWTSigner", "ACCESS_TOKEN_TYPE", "REFRESH_TOKEN_TYPE"]
