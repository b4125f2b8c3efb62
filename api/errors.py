from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.errors import AppError, ErrorKind, status_for


def error_response(message: str, status: int, details: dict | None = None):
    payload = {"status": status_for(status), "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def success_response(data=None, status: int = 200):
    payload = {"status": "success"}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def _first_message(messages) -> str:
    """Dig the first readable message out of marshmallow's nested messages."""
    if isinstance(messages, dict):
        for value in messages.values():
            return _first_message(value)
    if isinstance(messages, (list, tuple)) and messages:
        return _first_message(messages[0])
    return str(messages) if messages else "invalid input"


def register_error_handlers(app):
    # Application errors carry their own status
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logging.exception("Application error", exc_info=err)
        return error_response(err.message, err.status_code)

    # Marshmallow validation errors map to 405 (the legacy validation status)
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logging.debug("Validation failed: %s", err.messages)
        return error_response(
            _first_message(err.messages), ErrorKind.VALIDATION.http_status, details=err.messages
        )

    # Integrity errors (unique constraints on user ids)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        if current_app and current_app.debug:
            logging.exception("Integrity error", exc_info=err)
        if "unique" in message.lower() or "duplicate" in message.lower():
            return error_response("already exists", ErrorKind.CONFLICT.http_status)
        return error_response("integrity error", 400)

    # 404 Not Found for unknown routes
    @app.errorhandler(404)
    def not_found(e):
        return error_response("Resource not found", 404)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("An unexpected error occurred", 500, details=details)
