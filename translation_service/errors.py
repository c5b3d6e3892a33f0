"""API error types and the JSON error handlers registered on the app."""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base error carrying an HTTP status and a client-safe message."""

    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        result = dict(self.payload)
        result['error'] = self.message
        return result


class ValidationError(APIError):
    """Malformed or missing fields. ``errors`` maps field name to messages."""

    status_code = 422

    def __init__(self, errors, message='Validation failed'):
        super().__init__(message, payload={'errors': errors})
        self.errors = errors


class ConflictError(APIError):
    status_code = 409


class AuthError(APIError):
    status_code = 401


def register_error_handlers(app):
    """Make every error leave the API as JSON."""

    @app.errorhandler(APIError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500
