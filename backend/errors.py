# backend/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("finance-backend")


class ApiError(Exception):
    """Base for failures that map to a JSON error envelope."""
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        # a list of field messages is kept as-is for the envelope
        self.message = message if message is not None else self.default_message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(ApiError):
    status_code = 400
    default_message = "Resource already exists"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Not authorized"


class Forbidden(ApiError):
    # ownership failures share 401 with Unauthorized on the wire
    status_code = 401
    default_message = "Not authorized to access this resource"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class InternalError(ApiError):
    status_code = 500
    default_message = "Server Error"


def error_response(message, status_code, key="message"):
    return jsonify({"success": False, key: message}), status_code


def api_error_handler(key):
    """Build an errorhandler rendering ApiError under the given envelope key."""
    def handle(error):
        return error_response(error.message, error.status_code, key)
    return handle


def register_error_handlers(app):
    app.register_error_handler(ApiError, api_error_handler("message"))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return error_response("Server Error", 500)
