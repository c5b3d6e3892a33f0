"""Shared authentication utilities.

Access tokens are HS256 JWTs carrying ``user_id`` and a unique ``jti``.
Logout stores the ``jti`` in the revoked_tokens table, so a token stops
working before it expires.
"""

import uuid
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from translation_service.errors import AuthError


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def issue_token(user):
    """Create an access token for ``user``. Returns (token, expires_in seconds)."""
    expires_in = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    now = datetime.now(timezone.utc)
    payload = {
        'user_id': user.id,
        'jti': uuid.uuid4().hex,
        'iat': now,
        'exp': now + timedelta(seconds=expires_in),
    }
    token = jwt.encode(payload, _get_secret_key(), algorithm='HS256')
    return token, expires_in


def decode_token(token):
    """Validate ``token`` and return its payload, or raise AuthError."""
    from translation_service.models import RevokedToken

    try:
        payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        raise AuthError('Token has expired')
    except jwt.InvalidTokenError:
        raise AuthError('Token is invalid')

    if 'user_id' not in payload or 'jti' not in payload:
        raise AuthError('Token is invalid')
    if RevokedToken.is_revoked(payload['jti']):
        raise AuthError('Token has been revoked')
    return payload


def authenticate_request():
    """Check the bearer token of the current request and remember its claims on ``g``."""
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        raise AuthError('Token is missing')

    # Support both "Bearer <token>" and raw token formats
    token = auth_header.split(' ', 1)[1] if ' ' in auth_header else auth_header
    payload = decode_token(token.strip())

    g.current_user_id = payload['user_id']
    g.token_payload = payload
    return payload


def token_required(f):
    """
    Decorator to require a valid bearer token.

    Sets ``g.current_user_id`` and ``g.token_payload`` for the route.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route():
            return jsonify({'user_id': g.current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        authenticate_request()
        return f(*args, **kwargs)
    return decorated


def token_expiry(payload):
    """Expiry of a decoded token as a naive UTC datetime."""
    return datetime.fromtimestamp(payload['exp'], tz=timezone.utc).replace(tzinfo=None)


def require_token():
    """``before_request`` hook protecting every route of a blueprint."""
    authenticate_request()
