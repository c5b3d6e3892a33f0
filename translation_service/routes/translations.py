"""Translation CRUD, listing, search and the full streamed dump."""

import logging

from flask import Blueprint, current_app, jsonify, request

from translation_service import db
from translation_service.errors import ValidationError
from translation_service.models import Translation
from translation_service.services import translations as translation_service
from translation_service.services.cache import TRANSLATIONS_ALL_SHAPE, get_cache
from translation_service.services.export import dump_translations
from translation_service.services.records import parse_tag_param, translations_page
from translation_service.routes.streaming import conditional_stream
from translation_service.utils import api_operation, page_args, paginated_response, token_required
from translation_service.utils.validation import validate_translation_payload

translations_bp = Blueprint('translations', __name__)
logger = logging.getLogger(__name__)

LIST_PER_PAGE = 50
LIST_MAX_PER_PAGE = 100
SEARCH_PER_PAGE = 20
SEARCH_MAX_PER_PAGE = 50


@translations_bp.route('', methods=['GET'])
@token_required
@api_operation('Translation index', 'Failed to fetch translations')
def list_translations():
    """List translations with optional filters.

    Query params:
        - locale: exact locale
        - key: key prefix (e.g. "checkout.")
        - q: substring of the value
        - tag: comma-separated tag names, OR-matched
        - page, per_page: pagination (per_page capped at 100)
    """
    page, per_page = page_args(LIST_PER_PAGE, LIST_MAX_PER_PAGE)
    pagination = translations_page(
        page,
        per_page,
        locale=request.args.get('locale') or None,
        key=request.args.get('key') or None,
        q=request.args.get('q') or None,
        tags=parse_tag_param(request.args.get('tag')),
    )
    return paginated_response(pagination, [t.to_dict() for t in pagination.items]), 200


@translations_bp.route('/search', methods=['GET'])
@token_required
@api_operation('Translation search', 'Failed to search translations')
def search_translations():
    """Search key and value for ``q`` (at least 2 characters)."""
    q = (request.args.get('q') or '').strip()
    if len(q) < 2:
        raise ValidationError({'q': ['The q field is required and must be at least 2 characters.']})

    page, per_page = page_args(SEARCH_PER_PAGE, SEARCH_MAX_PER_PAGE)
    pagination = translations_page(
        page,
        per_page,
        search=q,
        locale=request.args.get('locale') or None,
        tags=parse_tag_param(request.args.get('tag')),
    )
    return paginated_response(pagination, [t.to_dict() for t in pagination.items]), 200


@translations_bp.route('/all', methods=['GET'])
@token_required
def dump_all_translations():
    """Stream every translation as a JSON array in id order (ETag-conditional)."""
    chunk_size = current_app.config['TRANSLATION_DUMP_CHUNK_SIZE']
    return conditional_stream(
        TRANSLATIONS_ALL_SHAPE,
        lambda: dump_translations(chunk_size),
        'Translation dump',
    )


@translations_bp.route('', methods=['POST'])
@token_required
@api_operation('Translation store', 'Failed to create translation')
def create_translation():
    data = validate_translation_payload(request.get_json(silent=True))
    translation = translation_service.create_translation(
        get_cache(),
        data['key'],
        data['locale'],
        data['value'],
        tags=data.get('tags'),
    )
    return jsonify(translation.to_dict()), 201


@translations_bp.route('/<int:translation_id>', methods=['GET'])
@token_required
@api_operation('Translation show', 'Failed to fetch translation')
def get_translation(translation_id):
    translation = db.get_or_404(Translation, translation_id, description='Translation not found')
    return jsonify(translation.to_dict()), 200


@translations_bp.route('/<int:translation_id>', methods=['PUT', 'PATCH'])
@token_required
@api_operation('Translation update', 'Failed to update translation')
def update_translation(translation_id):
    """Update fields; a ``tags`` list replaces the whole tag set."""
    translation = db.get_or_404(Translation, translation_id, description='Translation not found')
    data = validate_translation_payload(request.get_json(silent=True), partial=True)
    translation = translation_service.update_translation(get_cache(), translation, data)
    return jsonify(translation.to_dict()), 200


@translations_bp.route('/<int:translation_id>', methods=['DELETE'])
@token_required
@api_operation('Translation destroy', 'Failed to delete translation')
def delete_translation(translation_id):
    translation = db.get_or_404(Translation, translation_id, description='Translation not found')
    translation_service.delete_translation(get_cache(), translation)
    return jsonify({'message': 'Translation deleted successfully'}), 200
