from authsession.infra.security.werkzeug_hasher import WerkzeugPasswordHasher

__all__ = ["WerkzeugPasswordHasher"]
