"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from authsession.core.extensions import get_token_service
from authsession.infra.security.werkzeug_hasher import WerkzeugPasswordHasher
from authsession.services._shared.base import BaseService
from authsession.services._shared.errors import ServiceError
from authsession.services.auth.service import AuthService

F = TypeVar("F", bound=Callable[..., Any])


def json_body() -> dict[str, Any]:
    """Return the request JSON object, or an empty dict for missing/invalid bodies."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_subject() -> str:
    """Return the subject of the verified access token as a string."""

    return str(get_jwt_identity())


def service_errors(func: F) -> F:
    """Translate :class:`ServiceError` raised by a handler into API errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        try:
            return func(*args, **kwargs)
        except ServiceError as exc:
            raise BaseService.translate_exceptions(exc) from exc

    return wrapper  # type: ignore[return-value]


def auth_service() -> AuthService:
    """Build an :class:`AuthService` bound to the current app."""

    hasher = WerkzeugPasswordHasher(method=current_app.config.get("PASSWORD_HASH_METHOD", "scrypt"))
    return AuthService(tokens=get_token_service(), hasher=hasher)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
