import logging

from flask import current_app, jsonify
from sqlalchemy.exc import DBAPIError, IntegrityError
from werkzeug.exceptions import HTTPException

from sitecms.domain.exceptions import CmsError, SchemaDriftError
from sitecms.extensions import db

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE -> (status, message)
PG_ERROR_MAP = {
    "42P01": (500, "Database table missing"),
    "23505": (409, "Duplicate entry"),
    "23503": (400, "Referenced page does not exist"),
}


def _pgcode(error: DBAPIError):
    orig = getattr(error, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _error(kind: str, message: str, status: int):
    response = jsonify({
        "error": kind,
        "message": message,
    })
    response.status_code = status
    return response


def register_error_handlers(app):
    @app.errorhandler(CmsError)
    def handle_cms_error(error):
        if isinstance(error, SchemaDriftError):
            current_app.logger.error("Schema drift: %s", error)
        return _error(error.kind, str(error), error.status_code)

    @app.errorhandler(DBAPIError)
    def handle_database_error(error):
        db.session.rollback()

        code = _pgcode(error)
        if code in PG_ERROR_MAP:
            status, message = PG_ERROR_MAP[code]
            current_app.logger.warning("Database error %s: %s", code, error.orig)
            return _error("DatabaseError", message, status)

        if isinstance(error, IntegrityError):
            return _error("DatabaseError", "Duplicate entry", 409)

        current_app.logger.error(
            "Database error",
            extra={"statement": error.statement, "params": error.params},
            exc_info=error,
        )
        return _error("DatabaseError", _public_message(error), 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error

        current_app.logger.exception("Unhandled error: %s", error)
        return _error("InternalServerError", _public_message(error), 500)


def _public_message(error: Exception) -> str:
    if current_app.config.get("ENV_NAME") == "production":
        return "Internal server error"
    return str(error)
