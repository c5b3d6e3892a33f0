"""Authentication routes: login and logout."""

import logging

from flask import Blueprint, current_app, g, jsonify, request

from translation_service import limiter
from translation_service.errors import AuthError, ValidationError
from translation_service.models import RevokedToken, User
from translation_service.utils import issue_token, token_required
from translation_service.utils.auth import token_expiry

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(lambda: current_app.config['LOGIN_RATE_LIMIT'])
def login():
    """Authenticate a user and return a bearer token."""
    data = request.get_json(silent=True) or {}

    errors = {}
    for field in ('email', 'password'):
        if not isinstance(data.get(field), str) or not data[field].strip():
            errors[field] = [f'The {field} field is required.']
    if errors:
        raise ValidationError(errors)

    user = User.query.filter_by(email=data['email'].strip().lower()).first()
    if not user or not user.check_password(data['password']):
        raise AuthError('Invalid credentials')

    if not user.is_active:
        return jsonify({'error': 'Account is disabled'}), 403

    token, expires_in = issue_token(user)
    logger.info(f"User {user.id} logged in")

    return jsonify({
        'access_token': token,
        'token_type': 'Bearer',
        'expires_in': expires_in,
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout():
    """Revoke the token used for this request."""
    payload = g.token_payload
    RevokedToken.revoke(payload['jti'], payload['user_id'], token_expiry(payload))
    logger.info(f"User {payload['user_id']} logged out")
    return jsonify({'message': 'Logged out'}), 200
