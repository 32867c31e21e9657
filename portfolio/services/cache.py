"""
List Cache

Fetched content lists keyed by entity name. Mutations invalidate their key so
the next read refetches; reads are retried once before the error propagates.
"""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class ListCache:
    """Per-process cache of entity lists."""

    def __init__(self, ttl=60, retries=1):
        self.ttl = ttl
        self.retries = retries
        self._entries = {}
        self._generations = {}
        self._lock = threading.Lock()

    def init_app(self, app):
        self.ttl = app.config.get('LIST_CACHE_TTL', self.ttl)
        self.clear()

    def fetch(self, key, loader):
        """Return the cached list for ``key``, loading it with ``loader()`` on a miss.

        A load that overlaps an ``invalidate(key)`` is returned but not stored.
        """
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and (self.ttl <= 0 or now - entry[0] < self.ttl):
                return entry[1]
            generation = self._generations.get(key, 0)

        attempt = 0
        while True:
            try:
                value = loader()
                break
            except Exception as e:
                if attempt >= self.retries:
                    raise
                attempt += 1
                logger.warning('Loading %s failed (%s), retrying', key, e)

        with self._lock:
            if self._generations.get(key, 0) == generation:
                self._entries[key] = (time.monotonic(), value)
            else:
                logger.debug('Discarding %s list loaded across an invalidation', key)
        return value

    def invalidate(self, key):
        with self._lock:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug('Invalidated list cache for %s', key)

    def is_cached(self, key):
        with self._lock:
            return key in self._entries

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._generations.clear()
