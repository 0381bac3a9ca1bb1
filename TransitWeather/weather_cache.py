"""Time-bounded in-memory cache shared by all fetch paths."""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, NamedTuple, Optional


DEFAULT_TTL_SECONDS = 600  # 10 minutes


class CacheKey(NamedTuple):
    """Cache key: what was fetched and for which location."""
    kind: str  # "current" or "comprehensive"
    location: str


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    value: Any
    fetched_at: float  # seconds, as returned by the cache clock


class ExpiringCache:
    """
    Key/value store whose entries expire a fixed time after they were written.

    Expiry is evaluated when an entry is read, using the injected clock, so a
    stale entry behaves exactly like a missing one even before it is dropped.
    Entries are replaced whole under a lock; readers never see a partial write.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize cache.

        Args:
            ttl_seconds: How long an entry stays valid after put()
            clock: Returns the current time in seconds (injectable for tests)
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value for `key`, or None if absent or stale."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            age = self._clock() - entry.fetched_at
            if age < self.ttl_seconds:
                logging.debug(f"Cache hit for {key} (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
                return entry.value
            logging.debug(f"Cache entry for {key} expired (age: {age:.1f}s)")
            del self._entries[key]
            return None

    def put(self, key: CacheKey, value: Any) -> None:
        """Store `value` under `key`, replacing any previous entry."""
        entry = CacheEntry(key=key, value=value, fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logging.info(f"Weather cache cleared ({count} entries)")

    def stats(self) -> Dict[str, Any]:
        """Entries currently held, including stale ones not yet dropped."""
        with self._lock:
            keys = list(self._entries)
        return {"size": len(keys), "keys": keys}
