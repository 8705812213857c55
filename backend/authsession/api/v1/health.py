"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authsession.api.deps import json_response, timing
from authsession.core.extensions import db, get_token_service
from authsession.services._shared.errors import InternalError

bp = Blueprint("health", __name__)

# Probe subject that is never issued to a real user
_PROBE_SUBJECT = "__healthcheck__"


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and refresh store health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
        db.session.rollback()

    store_status = "ok"
    try:
        get_token_service().store.find_by_subject(_PROBE_SUBJECT)
    except InternalError:  # pragma: no cover - depends on store backend
        current_app.logger.exception("healthcheck.refresh_store_error")
        store_status = "fail"

    payload = {
        "status": "ok" if db_status == store_status == "ok" else "degraded",
        "db": db_status,
        "refresh_store": store_status,
        "backend": current_app.config.get("REFRESH_STORE_BACKEND"),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
