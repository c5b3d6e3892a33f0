"""Export routes serving translation snapshots to frontends.

The same views are mounted twice: under /api/export behind a bearer token
and under /api/public/export without one.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from translation_service.errors import ValidationError
from translation_service.services.cache import (
    EXPORT_ALL_SHAPE,
    LOCALES_KEY,
    TAGS_GENERATION_KEY,
    get_cache,
    locale_shape,
    tags_shape,
)
from translation_service.services.export import export_all_locales, export_by_tags, export_locale
from translation_service.services.records import distinct_locales, parse_tag_param
from translation_service.routes.streaming import conditional_stream
from translation_service.utils import api_operation
from translation_service.utils.auth import require_token
from translation_service.utils.validation import validate_locale_param

logger = logging.getLogger(__name__)


def _chunk_size():
    return current_app.config['EXPORT_CHUNK_SIZE']


def all_locales():
    """{"en": {"key": "value", ...}, "fr": {...}} for every locale."""
    chunk_size = _chunk_size()
    return conditional_stream(
        EXPORT_ALL_SHAPE,
        lambda: export_all_locales(chunk_size),
        'Export all locales',
    )


def single_locale(locale):
    """{"key": "value", ...} for one locale."""
    validate_locale_param(locale)
    chunk_size = _chunk_size()
    return conditional_stream(
        locale_shape(locale),
        lambda: export_locale(locale, chunk_size),
        f'Export single locale {locale}',
    )


def by_tags():
    """Translations carrying any of ``tags`` (comma-separated), grouped by locale.

    Query params:
        - tags: required, e.g. "mobile,web"
        - locale: optional, restricts the export to one locale
    """
    tags = parse_tag_param(request.args.get('tags'))
    if not tags:
        raise ValidationError({'tags': ['The tags field is required.']})
    locale = request.args.get('locale') or None
    if locale is not None:
        validate_locale_param(locale)

    cache = get_cache()
    shape = tags_shape(cache.generation(TAGS_GENERATION_KEY), tags, locale)
    chunk_size = _chunk_size()
    return conditional_stream(
        shape,
        lambda: export_by_tags(tags, chunk_size, locale=locale),
        'Export by tags',
    )


@api_operation('Export locales', 'Failed to fetch locales')
def locales():
    """Sorted list of locales in use, from the short-TTL cache."""
    result = get_cache().remember(
        LOCALES_KEY,
        current_app.config['LOCALES_CACHE_TTL'],
        distinct_locales,
    )
    return jsonify(result), 200


def create_export_blueprint(name, protected):
    bp = Blueprint(name, __name__)

    if protected:
        bp.before_request(require_token)

    bp.add_url_rule('', 'all_locales', all_locales, methods=['GET'])
    bp.add_url_rule('/locales', 'locales', locales, methods=['GET'])
    bp.add_url_rule('/tags', 'by_tags', by_tags, methods=['GET'])
    bp.add_url_rule('/<locale>', 'single_locale', single_locale, methods=['GET'])
    return bp
