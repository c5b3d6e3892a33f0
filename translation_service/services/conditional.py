"""Conditional GET negotiation for export responses."""

from werkzeug.http import parse_etags


def is_not_modified(if_none_match, server_token):
    """True when the client's If-None-Match names ``server_token`` exactly.

    Quoted and unquoted tags are accepted; weak tags and ``*`` never match.
    """
    if not if_none_match or not server_token:
        return False
    return parse_etags(if_none_match).is_strong(server_token)


def negotiate(cache, shape, if_none_match):
    """Return ``(token, not_modified)`` for an export of ``shape``.

    A match against the stored token short-circuits. Otherwise the stored
    token is ensured now, before any row is read: a write committing during
    the export deletes it, so the token can lag the data but never lead it.
    """
    current = cache.get_token(shape)
    if current and is_not_modified(if_none_match, current):
        return current, True
    return cache.ensure_token(shape), False
