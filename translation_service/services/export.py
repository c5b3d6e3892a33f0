"""Streaming JSON export of translations.

The exports are produced as a sequence of text fragments, one per chunk of
rows read from the store, so memory stays bounded by the chunk size no
matter how many translations exist.

Writers are small state machines: a container is opened, members are
appended with a separator only between two members, and the container is
closed. The grouped writer emits ``{"locale": {"key": "value"}}`` and
relies on rows arriving sorted by (locale, key); a locale group that was
already closed is never reopened, rows that would require it raise
``ExportOrderError``.
"""

import json
import logging
from itertools import groupby
from operator import attrgetter

from translation_service.services.records import iter_export_chunks, iter_translation_chunks

logger = logging.getLogger(__name__)


class ExportOrderError(RuntimeError):
    """Rows arrived out of group order."""


def encode(value):
    # Non-ASCII and '/' stay literal; quotes, backslashes and control chars are escaped
    return json.dumps(value, ensure_ascii=False)


class JsonContainerWriter:
    """Incremental writer for one JSON container: pending -> open -> closed."""

    opener = None
    closer = None

    def __init__(self):
        self.state = 'pending'
        self.count = 0

    def open(self):
        if self.state != 'pending':
            raise RuntimeError(f'Cannot open a {self.state} container')
        self.state = 'open'
        return self.opener

    def close(self):
        if self.state != 'open':
            raise RuntimeError(f'Cannot close a {self.state} container')
        self.state = 'closed'
        return self.closer

    def _separator(self):
        if self.state != 'open':
            raise RuntimeError(f'Cannot write to a {self.state} container')
        separator = ',' if self.count else ''
        self.count += 1
        return separator


class JsonObjectWriter(JsonContainerWriter):
    opener = '{'
    closer = '}'

    def member(self, name, value):
        return self.member_name(name) + encode(value)

    def member_name(self, name):
        """Start a member whose value the caller writes next."""
        return self._separator() + encode(str(name)) + ':'


class JsonArrayWriter(JsonContainerWriter):
    opener = '['
    closer = ']'

    def element(self, value):
        return self._separator() + encode(value)


class GroupedObjectWriter:
    """Writes an object of objects from rows sorted by group name."""

    def __init__(self):
        self.outer = JsonObjectWriter()
        self.inner = None
        self.current = None
        self.closed_groups = set()

    def open(self):
        return self.outer.open()

    def write_group(self, group, members):
        """Append ``members`` ((name, value) pairs) to ``group``.

        Consecutive calls for the same group keep writing into it, which is
        what happens when a locale spans several chunks.
        """
        parts = []
        if self.inner is None or group != self.current:
            if group in self.closed_groups:
                raise ExportOrderError(f'Group {group!r} was already closed')
            if self.inner is not None:
                parts.append(self.inner.close())
                self.closed_groups.add(self.current)
            parts.append(self.outer.member_name(group))
            self.inner = JsonObjectWriter()
            parts.append(self.inner.open())
            self.current = group

        for name, value in members:
            parts.append(self.inner.member(name, value))
        return ''.join(parts)

    def close(self):
        parts = []
        if self.inner is not None:
            parts.append(self.inner.close())
            self.closed_groups.add(self.current)
            self.inner = None
        parts.append(self.outer.close())
        return ''.join(parts)


def stream_grouped(chunks):
    """{"locale": {"key": "value", ...}, ...} from (locale, key, value) chunks."""
    writer = GroupedObjectWriter()
    yield writer.open()
    for rows in chunks:
        fragment = ''.join(
            writer.write_group(locale, ((row.key, row.value) for row in group))
            for locale, group in groupby(rows, key=attrgetter('locale'))
        )
        if fragment:
            yield fragment
    yield writer.close()


def stream_flat(chunks):
    """{"key": "value", ...} from (locale, key, value) chunks of one locale."""
    writer = JsonObjectWriter()
    yield writer.open()
    for rows in chunks:
        fragment = ''.join(writer.member(row.key, row.value) for row in rows)
        if fragment:
            yield fragment
    yield writer.close()


def stream_records(chunks, fields):
    """[{field: value, ...}, ...] from row chunks."""
    writer = JsonArrayWriter()
    yield writer.open()
    for rows in chunks:
        fragment = ''.join(
            writer.element({field: getattr(row, field) for field in fields})
            for row in rows
        )
        if fragment:
            yield fragment
    yield writer.close()


def guarded(stream, label):
    """Log the end of ``stream`` when the client goes away or a read fails.

    Closing this generator closes ``stream`` too, which stops the scan
    before the next chunk is read.
    """
    try:
        yield from stream
    except GeneratorExit:
        logger.info(f"{label} cancelled by client")
        raise
    except Exception as e:
        logger.error(f"{label} failed mid-stream: {e}")
        raise


def export_all_locales(chunk_size):
    return guarded(stream_grouped(iter_export_chunks(chunk_size)), 'Export all locales')


def export_locale(locale, chunk_size):
    return guarded(
        stream_flat(iter_export_chunks(chunk_size, locale=locale)),
        f'Export locale {locale}',
    )


def export_by_tags(tags, chunk_size, locale=None):
    return guarded(
        stream_grouped(iter_export_chunks(chunk_size, locale=locale, tags=tags)),
        'Export by tags',
    )


def dump_translations(chunk_size):
    return guarded(
        stream_records(iter_translation_chunks(chunk_size), ('id', 'key', 'locale', 'value')),
        'Translation dump',
    )
