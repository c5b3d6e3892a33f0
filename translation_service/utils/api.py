"""Helpers shared by the route modules."""

import logging
from functools import wraps

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from translation_service import db
from translation_service.errors import APIError


def api_operation(operation, failure_message):
    """
    Catch unexpected errors at the boundary of one API operation.

    API and HTTP errors pass through to their handlers. Anything else is
    rolled back, logged with the operation name, and answered with a
    generic 500 so internal details never reach the client.

    Usage:
        @bp.route('', methods=['POST'])
        @token_required
        @api_operation('Translation store', 'Failed to create translation')
        def create_translation():
            ...
    """
    logger = logging.getLogger('translation_service.api')

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except (APIError, HTTPException):
                raise
            except Exception as e:
                db.session.rollback()
                logger.error(f"{operation} error: {e}", exc_info=True)
                return jsonify({'error': failure_message}), 500
        return decorated
    return decorator


def page_args(default_per_page, max_per_page):
    """Read ``page`` and ``per_page`` from the query string, clamped to sane bounds."""
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    per_page = request.args.get('per_page', default_per_page, type=int) or default_per_page
    per_page = min(max(per_page, 1), max_per_page)
    return page, per_page


def paginated_response(pagination, items):
    return jsonify({
        'data': items,
        'total': pagination.total,
        'page': pagination.page,
        'per_page': pagination.per_page,
        'pages': pagination.pages,
        'has_more': pagination.has_next,
    })
