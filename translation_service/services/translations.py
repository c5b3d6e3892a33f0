"""Translation writes: create, update and delete with tag sync.

The row change and the association sync commit in one transaction, then
the export caches are invalidated. A reader never sees a translation with
half of its new tag set.
"""

import logging

from sqlalchemy.exc import IntegrityError

from translation_service import db
from translation_service.errors import ConflictError
from translation_service.models import Tag, Translation
from translation_service.services.invalidation import clear_translation_caches
from translation_service.services.records import normalize_tag_names

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = 'A translation for this key and locale already exists'


def resolve_tags(names):
    """Return Tag rows for ``names``, creating the missing ones (not committed)."""
    names = normalize_tag_names(names)
    if not names:
        return []

    # Pending row changes must wait for _commit, where a unique clash becomes a 409
    with db.session.no_autoflush:
        existing = {tag.name: tag for tag in Tag.query.filter(Tag.name.in_(names)).all()}
    tags = []
    for name in names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db.session.add(tag)
            existing[name] = tag
        tags.append(tag)
    return tags


def _duplicate_exists(key, locale, exclude_id=None):
    query = Translation.query.filter_by(key=key, locale=locale)
    if exclude_id is not None:
        query = query.filter(Translation.id != exclude_id)
    return query.first() is not None


def _commit(conflict_message):
    try:
        db.session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent write of the same unique value
        db.session.rollback()
        logger.info(f"Write rejected by unique constraint: {e.orig}")
        raise ConflictError(conflict_message)


def create_translation(cache, key, locale, value, tags=None):
    if _duplicate_exists(key, locale):
        raise ConflictError(DUPLICATE_MESSAGE)

    translation = Translation(key=key, locale=locale, value=value)
    translation.tags = resolve_tags(tags or [])
    db.session.add(translation)
    _commit(DUPLICATE_MESSAGE)

    clear_translation_caches(cache, [locale])
    logger.info(f"Created translation {translation.id} ({locale}:{key})")
    return translation


def update_translation(cache, translation, data):
    """Apply a partial update. ``data['tags']``, when present, replaces the tag set."""
    old_locale = translation.locale
    key = data.get('key', translation.key)
    locale = data.get('locale', translation.locale)

    if (key, locale) != (translation.key, translation.locale):
        if _duplicate_exists(key, locale, exclude_id=translation.id):
            raise ConflictError(DUPLICATE_MESSAGE)

    translation.key = key
    translation.locale = locale
    if 'value' in data:
        translation.value = data['value']
    if data.get('tags') is not None:
        translation.tags = resolve_tags(data['tags'])

    _commit(DUPLICATE_MESSAGE)

    clear_translation_caches(cache, [old_locale, translation.locale])
    logger.info(f"Updated translation {translation.id}")
    return translation


def delete_translation(cache, translation):
    translation_id, locale = translation.id, translation.locale
    db.session.delete(translation)
    db.session.commit()

    clear_translation_caches(cache, [locale])
    logger.info(f"Deleted translation {translation_id}")
