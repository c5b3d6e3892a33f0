"""ETag-conditional streamed JSON responses shared by the export routes."""

import logging

from flask import Response, jsonify, request, stream_with_context

from translation_service.services.cache import get_cache
from translation_service.services.conditional import negotiate

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'
CACHE_CONTROL = 'public, max-age=0'


def not_modified(token):
    response = Response(status=304)
    response.set_etag(token)
    response.headers['Cache-Control'] = CACHE_CONTROL
    return response


def conditional_stream(shape, stream_factory, operation, failure_message='Failed to export translations'):
    """Answer 304 when the client's token is current, else stream a fresh body.

    ``stream_factory`` returns an iterator of text fragments; it is only
    called when a body is needed.
    """
    try:
        token, fresh = negotiate(get_cache(), shape, request.headers.get('If-None-Match'))
        if fresh:
            return not_modified(token)
        body = stream_factory()
    except Exception as e:
        logger.error(f"{operation} error: {e}", exc_info=True)
        return jsonify({'error': failure_message}), 500

    response = Response(stream_with_context(body), status=200, content_type=JSON_CONTENT_TYPE)
    response.set_etag(token)
    response.headers['Cache-Control'] = CACHE_CONTROL
    return response
