"""Tag writes and the cached full tag listing."""

import logging

from sqlalchemy.exc import IntegrityError

from translation_service import db
from translation_service.errors import ConflictError
from translation_service.models import Tag
from translation_service.services.cache import TAGS_ALL_KEY
from translation_service.services.invalidation import clear_tag_caches
from translation_service.services.records import like_escape

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = 'A tag with this name already exists'


def _name_taken(name, exclude_id=None):
    query = Tag.query.filter_by(name=name)
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    return query.first() is not None


def _commit():
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.info(f"Tag write rejected by unique constraint: {e.orig}")
        raise ConflictError(DUPLICATE_MESSAGE)


def search_tags(page, per_page, search=None):
    query = Tag.query
    if search:
        query = query.filter(Tag.name.ilike(f'%{like_escape(search)}%', escape='\\'))
    return query.order_by(Tag.name).paginate(page=page, per_page=per_page, error_out=False)


def all_tags_cached(cache, ttl):
    """Every tag as {id, name}, ordered by name, from the short-TTL cache."""
    return cache.remember(
        TAGS_ALL_KEY,
        ttl,
        lambda: [tag.to_dict() for tag in Tag.query.order_by(Tag.name).all()],
    )


def create_tag(cache, name):
    if _name_taken(name):
        raise ConflictError(DUPLICATE_MESSAGE)

    tag = Tag(name=name)
    db.session.add(tag)
    _commit()

    clear_tag_caches(cache)
    logger.info(f"Created tag {tag.id} ({name})")
    return tag


def update_tag(cache, tag, name):
    if _name_taken(name, exclude_id=tag.id):
        raise ConflictError(DUPLICATE_MESSAGE)

    tag.name = name
    _commit()

    clear_tag_caches(cache)
    logger.info(f"Renamed tag {tag.id} to {name}")
    return tag


def delete_tag(cache, tag):
    """Delete a tag. Its association rows go with it; translations stay."""
    tag_id = tag.id
    db.session.delete(tag)
    db.session.commit()

    clear_tag_caches(cache)
    logger.info(f"Deleted tag {tag_id}")
