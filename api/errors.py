"""
Uniform JSON errors: {"error": CODE, "message": text, "status": int}.

Credential failures never say why they failed; the reason is only logged.
"""
import logging

from flask import jsonify, current_app
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from utils.exceptions import AuthError, ChirpyError, ConfigError, ForbiddenError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # abort(400/404/409, description=...) and werkzeug's own errors
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        return error_response(HTTP_ERROR_CODES.get(code, "HTTP_ERROR"), err.description, code)

    # bad request bodies are a 400, with marshmallow's per-field messages
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("VALIDATION_ERROR", "Invalid input", 400, details=err.messages)

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        logger.info("Authentication rejected: %s", err.reason.value)
        return error_response("UNAUTHORIZED", err.public_message, err.status)

    @app.errorhandler(ForbiddenError)
    def handle_forbidden(err: ForbiddenError):
        return error_response("FORBIDDEN", err.public_message, err.status)

    @app.errorhandler(ConfigError)
    def handle_config_error(err: ConfigError):
        logger.critical("Configuration error: %s", err)
        return error_response("INTERNAL_ERROR", err.public_message, err.status)

    # HashingError and anything else raised from utils.exceptions
    @app.errorhandler(ChirpyError)
    def handle_chirpy_error(err: ChirpyError):
        logger.error("%s: %s", err.__class__.__name__, err, exc_info=err)
        return error_response("INTERNAL_ERROR", err.public_message, err.status)

    # Unique emails race past the explicit check; FK failures mean a stale id
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        reason = str(getattr(err, "orig", err)).lower()
        logger.warning("Integrity error: %s", reason)
        if "unique" in reason:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        if "foreign key" in reason:
            return error_response("BAD_REQUEST", "Foreign key constraint failed.", 400)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
