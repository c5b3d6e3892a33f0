"""Post-commit cache invalidation for translation and tag writes.

Write handlers call these right after a successful commit, never before,
so a reader that finds a token missing and recomputes sees committed data.

Tag-filtered export tokens are not enumerated: their keys embed a
generation number and a translation write moves to the next generation.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from translation_service.services.cache import (
    EXPORT_ALL_SHAPE,
    LOCALES_KEY,
    TAGS_ALL_KEY,
    TAGS_GENERATION_KEY,
    TAGS_TOKEN_PATTERN,
    TOKEN_SUFFIX,
    TRANSLATIONS_ALL_SHAPE,
    locale_shape,
    tags_generation_pattern,
)
from translation_service.services.records import distinct_locales

logger = logging.getLogger(__name__)


def clear_translation_caches(cache, locales=()):
    """Drop every cache entry that may describe translations.

    Clears the global tokens, the token of every locale in the store plus
    ``locales`` (the ones the write touched, which may no longer exist),
    the cached locale list, and retires the current tag-filter generation.
    """
    shapes = [EXPORT_ALL_SHAPE, TRANSLATIONS_ALL_SHAPE]
    try:
        known = set(distinct_locales())
    except SQLAlchemyError as e:
        logger.error(f"Locale lookup failed during invalidation, clearing all export tokens: {e}")
        cache.delete_matching(f'export:*{TOKEN_SUFFIX}')
        known = set()

    known.update(loc for loc in locales if loc)
    shapes.extend(locale_shape(loc) for loc in sorted(known))
    cache.invalidate(*shapes)
    cache.delete(LOCALES_KEY)

    generation = cache.bump_generation(TAGS_GENERATION_KEY)
    if generation is not None:
        # Also catches tokens a slow reader stored under an older generation
        cache.delete_matching(TAGS_TOKEN_PATTERN, exclude=tags_generation_pattern(generation))
    else:
        cache.delete_matching(TAGS_TOKEN_PATTERN)

    logger.debug(f"Cleared translation caches for {len(known)} locales")


def clear_tag_caches(cache, locales=()):
    """Tags feed the translation exports, so this cascades."""
    cache.delete(TAGS_ALL_KEY)
    clear_translation_caches(cache, locales)
