"""Cache layer shared by every request.

Two classes of entries live here:

- content caches (the tag list, the locale list): JSON payloads with a
  short TTL, safe to expire on their own;
- freshness tokens (export ETags): stored without a TTL and removed only by
  invalidation after a write.

Redis is used when REDIS_URL is set. Without it entries are kept in process
memory, which is only correct for a single worker (development, tests).
Cache errors are logged and behave like misses; they never reach callers.
"""

import fnmatch
import hashlib
import json
import logging
import secrets
import threading
import time

import redis
from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_NAME = 'translation_cache'

# Cache keys
TAGS_ALL_KEY = 'tags:all'
LOCALES_KEY = 'export:locales'
EXPORT_ALL_SHAPE = 'export:all'
TRANSLATIONS_ALL_SHAPE = 'translations:all'
TAGS_GENERATION_KEY = 'export:tags:generation'
TOKEN_SUFFIX = ':etag'


def locale_shape(locale):
    return f'export:{locale}'


def tag_filter_hash(tags, locale=None):
    """Stable hash of an OR tag filter: order and duplicates don't matter."""
    names = sorted({t for t in tags if t})
    raw = ','.join(names) + '|' + (locale or '')
    return hashlib.sha256(raw.encode('utf-8')).hexdigest()[:32]


def tags_shape(generation, tags, locale=None):
    return f'export:tags:g{generation}:{tag_filter_hash(tags, locale)}'


# Every tag-filter token of any generation, but not the counter itself
TAGS_TOKEN_PATTERN = 'export:tags:g[0-9]*'


def tags_generation_pattern(generation):
    return f'export:tags:g{generation}:*'


def new_token():
    """Opaque freshness token (128 random bits)."""
    return secrets.token_hex(16)


class MemoryBackend:
    """In-process key/value store with optional per-key expiry."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def _live(self, key):
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return None
        return value

    def get(self, key):
        with self._lock:
            return self._live(key)

    def set(self, key, value, ttl=None, nx=False):
        with self._lock:
            if nx and self._live(key) is not None:
                return False
            expires_at = time.monotonic() + ttl if ttl else None
            self._data[key] = (value, expires_at)
            return True

    def delete(self, *keys):
        with self._lock:
            removed = 0
            for key in keys:
                if self._data.pop(key, None) is not None:
                    removed += 1
            return removed

    def incr(self, key):
        with self._lock:
            value = int(self._live(key) or 0) + 1
            self._data[key] = (str(value), None)
            return value

    def delete_matching(self, pattern, exclude=None):
        with self._lock:
            keys = [
                k for k in self._data
                if fnmatch.fnmatchcase(k, pattern)
                and not (exclude and fnmatch.fnmatchcase(k, exclude))
            ]
            for key in keys:
                del self._data[key]
            return len(keys)

    def clear(self, prefix=''):
        with self._lock:
            for key in [k for k in self._data if k.startswith(prefix)]:
                del self._data[key]


class RedisBackend:
    """Thin adapter over a redis-py client created with decode_responses=True."""

    def __init__(self, client):
        self.client = client

    def get(self, key):
        return self.client.get(key)

    def set(self, key, value, ttl=None, nx=False):
        return bool(self.client.set(key, value, ex=ttl, nx=nx))

    def delete(self, *keys):
        if not keys:
            return 0
        return self.client.delete(*keys)

    def incr(self, key):
        return self.client.incr(key)

    def delete_matching(self, pattern, exclude=None):
        removed = 0
        batch = []
        for key in self.client.scan_iter(match=pattern, count=500):
            if exclude and fnmatch.fnmatchcase(key, exclude):
                continue
            batch.append(key)
            if len(batch) >= 500:
                removed += self.client.delete(*batch)
                batch = []
        if batch:
            removed += self.client.delete(*batch)
        return removed

    def clear(self, prefix=''):
        self.delete_matching(f'{prefix}*')


class CacheStore:
    """Namespaced cache operations used by the routes and the invalidation hook.

    Every method swallows backend errors: a read failure is a miss, a write
    or delete failure is logged and skipped.
    """

    def __init__(self, backend, prefix=''):
        self.backend = backend
        self.prefix = prefix

    def _key(self, key):
        return f'{self.prefix}{key}'

    def get(self, key):
        try:
            return self.backend.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    def set(self, key, value, ttl=None):
        try:
            return self.backend.set(self._key(key), value, ttl=ttl)
        except redis.RedisError as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    def delete(self, *keys):
        if not keys:
            return 0
        try:
            return self.backend.delete(*[self._key(k) for k in keys])
        except redis.RedisError as e:
            logger.warning(f"Cache delete error for {', '.join(keys)}: {e}")
            return 0

    def delete_matching(self, pattern, exclude=None):
        """Delete keys matching the glob ``pattern``, except those matching ``exclude``."""
        try:
            return self.backend.delete_matching(
                self._key(pattern),
                exclude=self._key(exclude) if exclude else None,
            )
        except redis.RedisError as e:
            logger.warning(f"Cache delete error for pattern {pattern}: {e}")
            return 0

    def clear(self):
        try:
            self.backend.clear(self.prefix)
        except redis.RedisError as e:
            logger.warning(f"Cache clear error: {e}")

    def remember(self, key, ttl, factory):
        """Return the cached JSON value for ``key`` or compute, store and return it."""
        cached = self.get(key)
        if cached is not None:
            try:
                return json.loads(cached)
            except ValueError:
                logger.warning(f"Discarding unreadable cache entry {key}")
        value = factory()
        self.set(key, json.dumps(value), ttl=ttl)
        return value

    # Freshness tokens

    def get_token(self, shape):
        return self.get(shape + TOKEN_SUFFIX)

    def ensure_token(self, shape):
        """Return the stored token for ``shape``, creating it if absent.

        Creation is set-if-absent, so concurrent misses agree on the first
        stored token. If the cache is unreachable the fresh token is returned
        unstored, which only means the next request won't get a 304.
        """
        key = self._key(shape + TOKEN_SUFFIX)
        token = new_token()
        try:
            if self.backend.set(key, token, nx=True):
                return token
            return self.backend.get(key) or token
        except redis.RedisError as e:
            logger.warning(f"Cache token error for {shape}: {e}")
            return token

    def invalidate(self, *shapes):
        return self.delete(*[shape + TOKEN_SUFFIX for shape in shapes])

    def generation(self, name):
        value = self.get(name)
        try:
            return int(value) if value is not None else 0
        except ValueError:
            return 0

    def bump_generation(self, name):
        """Increment a generation counter. Returns the new value or None on failure."""
        try:
            return self.backend.incr(self._key(name))
        except redis.RedisError as e:
            logger.warning(f"Cache incr error for {name}: {e}")
            return None


def create_backend(redis_url):
    if not redis_url:
        logger.warning("REDIS_URL not set - using in-process cache (single worker only)")
        return MemoryBackend()

    client = redis.from_url(
        redis_url,
        decode_responses=True,
        socket_timeout=2,
        socket_connect_timeout=2,
    )
    try:
        client.ping()
        logger.info("Redis connected successfully")
    except redis.RedisError as e:
        # Keep the client: redis-py reconnects on the next command
        logger.error(f"Redis connection failed: {e}")
    return RedisBackend(client)


def init_cache(app, backend=None):
    """Create the cache for ``app``; it lives as long as the app does."""
    if backend is None:
        backend = create_backend(app.config.get('REDIS_URL'))
    store = CacheStore(backend, prefix=app.config.get('CACHE_KEY_PREFIX', ''))
    app.extensions[EXTENSION_NAME] = store
    return store


def get_cache():
    """Cache of the current app."""
    return current_app.extensions[EXTENSION_NAME]
