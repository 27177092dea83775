"""Thread-safe TTL cache for catalog lookups.

Resolved tire attributes are keyed on the normalized catalog code.
Entries expire so corrections upstream (or a changed page layout that
was briefly misparsed) stop being served after ``ttl`` seconds.
"""

import logging
import threading

from cachetools import TTLCache

from tirestore.models.tire import TireAttributes

logger = logging.getLogger(__name__)


class CatalogCache:
    """Bounded TTL cache of resolved tire attributes.

    Thread-safe via a threading.Lock. Each process gets its own instance.
    """

    def __init__(self, maxsize: int = 1024, ttl: int = 86400) -> None:
        """Initialize the cache.

        Args:
            maxsize: Max entries before least recently used ones are evicted.
            ttl: Time-to-live in seconds (default one day).
        """
        self._cache: TTLCache[str, TireAttributes] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    @staticmethod
    def make_key(catalog_code: str) -> str:
        return catalog_code.strip().upper()

    def get(self, catalog_code: str) -> TireAttributes | None:
        """Get cached attributes (thread-safe). Returns None on miss."""
        with self._lock:
            return self._cache.get(self.make_key(catalog_code))

    def set(self, catalog_code: str, value: TireAttributes) -> None:
        """Store attributes in the cache (thread-safe)."""
        key = self.make_key(catalog_code)
        with self._lock:
            self._cache[key] = value
        logger.debug("Catalog cache set: %s", key)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
