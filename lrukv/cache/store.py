"""
Shared Cache Store Module

This module wraps the LRU engine in a lock so a single cache instance can
be shared by every client connection.

Every public method holds the lock for its whole duration. Compound
check-then-act sequences use locked() to run against the engine while
the lock is held.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..config.settings import settings
from .lru import LRUCache


class CacheStore:
    """
    Process-wide owner of the LRU cache.

    The server creates one CacheStore at startup and hands it to the
    dispatcher. Cache operations from different connections are mutually
    exclusive, which keeps the recency list consistent.

    Attributes:
        cache: The underlying LRUCache (only touch it under the lock)
    """

    def __init__(self, max_size: int = None):
        """
        Initialize the store.

        Args:
            max_size: Initial capacity (default from settings.MAX_SIZE)
        """
        self.cache = LRUCache(max_size if max_size is not None else settings.MAX_SIZE)
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[LRUCache]:
        """Hold the lock and yield the engine."""
        with self._lock:
            yield self.cache

    def get(self, key: str) -> Optional[Any]:
        """Return the value for key (promoting it), or None if absent."""
        with self._lock:
            return self.cache.get(key)

    def set(self, key: str, value: Any) -> Optional[str]:
        """Store value under key. Returns the evicted key, if any."""
        with self._lock:
            return self.cache.set(key, value)

    def delete(self, key: str) -> bool:
        """
        Remove a key if it is live.

        Returns:
            True if the key was removed, False if it did not exist
        """
        with self._lock:
            if key not in self.cache:
                return False
            self.cache.remove(key)
            return True

    def flush(self) -> None:
        """Remove all keys from the store."""
        with self._lock:
            self.cache.flush()

    def size(self) -> int:
        """Get the current number of keys in the store."""
        with self._lock:
            return self.cache.size

    def max_size(self) -> int:
        """Get the current capacity."""
        with self._lock:
            return self.cache.max_size

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the store."""
        with self._lock:
            return self.cache.get_stats()
