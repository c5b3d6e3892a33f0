"""Tag management routes."""

from flask import Blueprint, current_app, jsonify, request

from translation_service import db
from translation_service.models import Tag
from translation_service.services import tags as tag_service
from translation_service.services.cache import get_cache
from translation_service.utils import api_operation, page_args, paginated_response, token_required
from translation_service.utils.validation import validate_tag_payload

tags_bp = Blueprint('tags', __name__)


@tags_bp.route('', methods=['GET'])
@token_required
@api_operation('Tag index', 'Failed to fetch tags')
def list_tags():
    """List tags ordered by name, optionally filtered by ``search`` (substring)."""
    page, per_page = page_args(50, 100)
    pagination = tag_service.search_tags(page, per_page, search=request.args.get('search') or None)
    return paginated_response(pagination, [tag.to_dict() for tag in pagination.items]), 200


@tags_bp.route('/all', methods=['GET'])
@token_required
@api_operation('Tag all', 'Failed to fetch tags')
def all_tags():
    """Every tag, for dropdowns. Served from the short-TTL cache."""
    tags = tag_service.all_tags_cached(get_cache(), current_app.config['TAGS_CACHE_TTL'])
    return jsonify(tags), 200


@tags_bp.route('', methods=['POST'])
@token_required
@api_operation('Tag store', 'Failed to create tag')
def create_tag():
    data = validate_tag_payload(request.get_json(silent=True))
    tag = tag_service.create_tag(get_cache(), data['name'])
    return jsonify(tag.to_dict()), 201


@tags_bp.route('/<int:tag_id>', methods=['GET'])
@token_required
@api_operation('Tag show', 'Failed to fetch tag')
def get_tag(tag_id):
    tag = db.get_or_404(Tag, tag_id, description='Tag not found')
    return jsonify(tag.to_dict(include_translations=True)), 200


@tags_bp.route('/<int:tag_id>', methods=['PUT', 'PATCH'])
@token_required
@api_operation('Tag update', 'Failed to update tag')
def update_tag(tag_id):
    tag = db.get_or_404(Tag, tag_id, description='Tag not found')
    data = validate_tag_payload(request.get_json(silent=True))
    tag = tag_service.update_tag(get_cache(), tag, data['name'])
    return jsonify(tag.to_dict()), 200


@tags_bp.route('/<int:tag_id>', methods=['DELETE'])
@token_required
@api_operation('Tag destroy', 'Failed to delete tag')
def delete_tag(tag_id):
    tag = db.get_or_404(Tag, tag_id, description='Tag not found')
    tag_service.delete_tag(get_cache(), tag)
    return jsonify({'message': 'Tag deleted successfully'}), 200
