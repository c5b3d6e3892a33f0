"""Read side of the record store: filters, distinct locales and chunked scans.

Chunked scans page through the table with keyset conditions on the sort key
instead of OFFSET, and each chunk is read on its own short-lived connection,
so a long export never holds one transaction (or more than one chunk of rows)
for its whole duration.
"""

from sqlalchemy import and_, exists, or_, select

from translation_service import db
from translation_service.models import Tag, Translation, tag_translation


def parse_tag_param(raw):
    """Split a comma-separated ``tags`` query value into clean names."""
    if not raw:
        return []
    return normalize_tag_names(raw.split(','))


def normalize_tag_names(names):
    """Trim names, drop blanks and duplicates, keep first-seen order."""
    seen = []
    for name in names or []:
        if not isinstance(name, str):
            continue
        name = name.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def has_any_tag(names):
    """Clause matching translations with at least one of ``names`` (OR)."""
    return exists().where(
        tag_translation.c.translation_id == Translation.id,
        tag_translation.c.tag_id == Tag.id,
        Tag.name.in_(names),
    )


def like_escape(term):
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def translation_filters(locale=None, key=None, q=None, tags=None, search=None):
    """WHERE clauses for the list and search endpoints.

    ``key`` is a prefix match, ``q`` a substring match on the value and
    ``search`` a substring match on key OR value.
    """
    clauses = []
    if locale:
        clauses.append(Translation.locale == locale)
    if key:
        clauses.append(Translation.key.like(like_escape(key) + '%', escape='\\'))
    if q:
        clauses.append(Translation.value.like('%' + like_escape(q) + '%', escape='\\'))
    if search:
        pattern = '%' + like_escape(search) + '%'
        clauses.append(or_(
            Translation.key.like(pattern, escape='\\'),
            Translation.value.like(pattern, escape='\\'),
        ))
    if tags:
        clauses.append(has_any_tag(tags))
    return clauses


def translations_page(page, per_page, **filters):
    stmt = select(Translation).where(*translation_filters(**filters)).order_by(Translation.id)
    return db.paginate(stmt, page=page, per_page=per_page, error_out=False)


def distinct_locales():
    """Sorted list of every locale that currently has a translation."""
    rows = db.session.execute(
        select(Translation.locale).distinct().order_by(Translation.locale)
    ).scalars().all()
    return list(rows)


def _fetch(stmt):
    with db.engine.connect() as conn:
        return conn.execute(stmt).all()


def iter_export_chunks(chunk_size, locale=None, tags=None):
    """Yield lists of (locale, key, value) rows in (locale, key) order.

    Optionally restricted to one locale and/or to translations carrying at
    least one of ``tags``. Each row appears once even when it matches
    several tags.
    """
    last = None
    while True:
        stmt = select(Translation.locale, Translation.key, Translation.value)
        if locale is not None:
            stmt = stmt.where(Translation.locale == locale)
        if tags:
            stmt = stmt.where(has_any_tag(tags))
        if last is not None:
            last_locale, last_key = last
            stmt = stmt.where(or_(
                Translation.locale > last_locale,
                and_(Translation.locale == last_locale, Translation.key > last_key),
            ))
        stmt = stmt.order_by(Translation.locale, Translation.key).limit(chunk_size)

        rows = _fetch(stmt)
        if not rows:
            return
        yield rows
        if len(rows) < chunk_size:
            return
        last = (rows[-1].locale, rows[-1].key)


def iter_translation_chunks(chunk_size):
    """Yield lists of (id, key, locale, value) rows in id order."""
    last_id = None
    while True:
        stmt = select(Translation.id, Translation.key, Translation.locale, Translation.value)
        if last_id is not None:
            stmt = stmt.where(Translation.id > last_id)
        stmt = stmt.order_by(Translation.id).limit(chunk_size)

        rows = _fetch(stmt)
        if not rows:
            return
        yield rows
        if len(rows) < chunk_size:
            return
        last_id = rows[-1].id
