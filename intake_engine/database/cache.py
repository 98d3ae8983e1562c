"""
In-memory cache with TTL for the question library
Avoids re-reading and re-parsing the JSON definitions on every request
"""
import time
from typing import Any, Dict, Optional, Tuple
from threading import Lock

from intake_engine.core.config import LIBRARY_CACHE_TTL_SECONDS


class TTLCache:
    """
    Thread-safe in-memory cache with TTL (Time To Live)
    """
    def __init__(self, ttl_seconds: int = 60):
        self.ttl = ttl_seconds
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired"""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if time.monotonic() >= expiry:
                del self._cache[key]
                return None
            return value

    def set(self, key: str, value: Any):
        """Set value in cache with TTL"""
        with self._lock:
            self._cache[key] = (value, time.monotonic() + self.ttl)

    def clear(self):
        with self._lock:
            self._cache.clear()


_library_cache = TTLCache(ttl_seconds=LIBRARY_CACHE_TTL_SECONDS)


def get_library_cache() -> TTLCache:
    return _library_cache
