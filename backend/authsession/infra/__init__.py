"""Concrete adapters for the service-layer ports (PyJWT, Redis, SQLAlchemy, werkzeug)."""
