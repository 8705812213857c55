"""RFC 7807 (``application/problem+json``) error responses for the API.

Service code raises :mod:`authsession.services._shared.errors`; the API layer
translates those into :class:`APIError` subclasses, and the handlers below
render every failure (API errors, marshmallow validation, Werkzeug HTTP
errors, Flask-JWT-Extended rejections, database outages, anything else) as a
problem document carrying a stable ``code`` and the ``request_id``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, cast

from flask import Flask, Response, jsonify, request
from flask_jwt_extended import JWTManager
from marshmallow import ValidationError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from authsession.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Client-facing codes for the auth flow; the front-end keys its messages on them.
INVALID_DATA = "INVALID_DATA"
EMAIL_EXISTS = "EMAIL_EXISTS"
EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
INVALID_PASSWORD = "INVALID_PASSWORD"

RETRY_LATER = "Server error, please try again later"


def status_code_name(status: int) -> str:
    """Return a snake_case code derived from the HTTP reason phrase (``401`` → ``unauthorized``)."""
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        return "error"
    return phrase.lower().replace(" ", "_").replace("-", "_")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build a problem document for the current request.

    :param status: HTTP status code.
    :param code: Stable machine-readable code.
    :param message: Client-safe summary; goes into ``detail``.
    :param details: Optional structured payload (validation messages).
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    return problem


def _problem_response(problem: dict[str, Any]) -> tuple[Response, int]:
    resp = jsonify(problem)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, problem["status"]


def _log_problem(kind: str, problem: dict[str, Any], *, exc_info: bool = False) -> None:
    """Log 5xx as errors and 4xx as warnings, always with the request id."""
    level = logging.ERROR if problem["status"] >= 500 else logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s detail=%s request_id=%s",
        kind,
        problem["code"],
        problem["status"],
        problem["detail"],
        problem["request_id"],
        exc_info=exc_info,
    )


class APIError(Exception):
    """
    Error that maps one-to-one onto a problem response.

    :param message: Client-safe description.
    :param status_code: HTTP status, ``400`` by default.
    :param code: Machine-readable code, ``"bad_request"`` by default.
    :param details: Optional structured payload.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details,
        )


class BadRequest(APIError):
    """400 with one of the auth-flow codes."""

    def __init__(self, message: str, code: str = INVALID_DATA, details=None) -> None:
        super().__init__(message, HTTPStatus.BAD_REQUEST, code, details)


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, HTTPStatus.NOT_FOUND, "not_found")


class Unauthorized(APIError):
    """401; the message never says why a token was refused."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, HTTPStatus.UNAUTHORIZED, "unauthorized")


class InternalServerError(APIError):
    """500 for store or signing failures; the client should retry later."""

    def __init__(self, message: str = RETRY_LATER) -> None:
        super().__init__(message, HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error")


def register_jwt_handlers(manager: JWTManager) -> None:
    """Render Flask-JWT-Extended failures on protected routes as 401 problems."""

    def _reject(message: str) -> tuple[Response, int]:
        problem = _as_problem(status=HTTPStatus.UNAUTHORIZED, code="unauthorized", message=message)
        _log_problem("JWT rejected", problem)
        return _problem_response(problem)

    @manager.unauthorized_loader
    def _missing_token(reason: str):
        return _reject("Missing access token")

    @manager.invalid_token_loader
    def _invalid_token(reason: str):
        return _reject("Invalid access token")

    @manager.expired_token_loader
    def _expired_token(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
        return _reject("Access token expired")

    @manager.token_verification_failed_loader
    def _verification_failed(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
        return _reject("Invalid access token")


def init_app(app: Flask) -> None:
    """Install the problem+json error handlers on ``app``."""
    from authsession.core.extensions import jwt

    register_jwt_handlers(jwt)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        problem = err.to_problem()
        _log_problem("APIError", problem, exc_info=err.status_code >= 500 and err.__cause__ is not None)
        return _problem_response(problem)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.BAD_REQUEST,
            code=INVALID_DATA,
            message="Request body validation failed",
            details={"errors": cast(Any, err.messages)},
        )
        _log_problem("ValidationError", problem)
        return _problem_response(problem)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        problem = _as_problem(status=status, code=status_code_name(status), message=message)
        _log_problem("HTTPException", problem)
        return _problem_response(problem)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        problem = _as_problem(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        _log_problem("OperationalError", problem, exc_info=True)
        return _problem_response(problem)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Internal details stay in the log
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message=RETRY_LATER,
        )
        _log_problem("Unhandled exception", problem, exc_info=True)
        return _problem_response(problem)
