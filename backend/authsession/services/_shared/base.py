# authsession/services/_shared/base.py
from __future__ import annotations

from authsession.core import errors as api_errors
from authsession.services._shared.errors import (
    EmailExistsError,
    EmailNotFoundError,
    InternalError,
    InvalidCredentialsError,
    InvalidPasswordError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from authsession.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a helper to run read-write units of work.
    * Centralize error translation (service errors → API errors).
    * Keep services thin, orchestration-only, no web/ORM leakage.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, EmailExistsError):
            return api_errors.BadRequest("Email already registered", code=api_errors.EMAIL_EXISTS)

        if isinstance(exc, EmailNotFoundError):
            return api_errors.BadRequest("Email not found", code=api_errors.EMAIL_NOT_FOUND)

        if isinstance(exc, InvalidPasswordError):
            return api_errors.BadRequest("Invalid password", code=api_errors.INVALID_PASSWORD)

        if isinstance(exc, InvalidCredentialsError):
            return api_errors.BadRequest("Invalid credentials", code=api_errors.INVALID_DATA)

        # Verification failures were already folded into UnauthorizedError
        if isinstance(exc, UnauthorizedError):
            return api_errors.Unauthorized()

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, InternalError):
            return api_errors.InternalServerError()

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
