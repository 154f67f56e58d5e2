"""
LRU Cache Engine

This module implements the bounded Least Recently Used (LRU) cache that
backs the server.

Recency Layout:
- Entries live in a flat dict keyed by their own key
- Each entry stores the keys of its neighbours (prev/next), so the
  recency list is a doubly linked list expressed through dict lookups
- head is the most recently used key, tail the least recently used
- On access (get/set), the entry is unlinked and relinked at head
- On eviction, the tail entry is unlinked and dropped
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class CacheEntry:
    """
    One stored key-value pair and its place in the recency list.

    Attributes:
        key: The key this entry is stored under
        value: The stored payload
        prev: Key of the next more recently used entry (None at head)
        next: Key of the next less recently used entry (None at tail)
    """
    key: str
    value: Any
    prev: Optional[str] = None
    next: Optional[str] = None


class LRUCache:
    """
    Fixed-capacity key-value store with least-recently-used eviction.

    All of get, set and remove run in O(1) average time: the entry is
    found through the dict, and its neighbours are found through the
    dict as well, so relinking never walks the list.

    Usage:
        lru = LRUCache(max_size=2)
        lru.set("a", 1)
        lru.set("b", 2)
        lru.get("a")       # Returns 1, "a" becomes most recently used
        lru.set("c", 3)    # Evicts "b"

    The engine does not validate capacity changes. Callers must ensure
    set_max_size() is given a value >= 1 and >= the current size.

    Attributes:
        max_size: Maximum number of entries before eviction
        entries: Mapping of key -> CacheEntry
        head: Key of the most recently used entry, or None when empty
        tail: Key of the least recently used entry, or None when empty
    """

    def __init__(self, max_size: int):
        """
        Initialize the LRU cache.

        Args:
            max_size: Maximum number of entries (must be positive)

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.entries: Dict[str, CacheEntry] = {}
        self.head: Optional[str] = None
        self.tail: Optional[str] = None

    @property
    def size(self) -> int:
        """Number of live entries."""
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def set_max_size(self, max_size: int) -> None:
        """
        Replace the capacity bound.

        Precondition: 1 <= max_size and max_size >= self.size. Shrinking
        below the live count is not handled here.
        """
        self.max_size = max_size

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value and mark it as most recently used.

        Args:
            key: The key to look up

        Returns:
            The stored value, or None if the key is not live

        Time Complexity: O(1)
        """
        entry = self.entries.get(key)
        if entry is None:
            return None

        self._move_to_front(entry)
        return entry.value

    def set(self, key: str, value: Any) -> Optional[str]:
        """
        Store a value and mark it as most recently used.

        Args:
            key: The key to store
            value: The value to store

        Returns:
            The evicted key if a new key pushed the cache over capacity,
            None otherwise

        Time Complexity: O(1)
        """
        entry = self.entries.get(key)
        if entry is not None:
            entry.value = value
            self._move_to_front(entry)
            return None

        evicted_key = None
        if len(self.entries) >= self.max_size:
            evicted_key = self.tail
            self.remove(evicted_key)

        entry = CacheEntry(key=key, value=value)
        self.entries[key] = entry
        self._link_front(entry)
        return evicted_key

    def remove(self, key: str) -> None:
        """
        Remove a live entry.

        Args:
            key: The key to remove

        Raises:
            KeyError: If the key is not live. Callers check first.

        Time Complexity: O(1)
        """
        entry = self.entries.pop(key)
        self._unlink(entry)

    def flush(self) -> None:
        """Remove every entry."""
        self.entries.clear()
        self.head = None
        self.tail = None

    def peek(self, key: str) -> Optional[Any]:
        """
        Get a value without touching the recency order.

        Returns:
            The stored value, or None if the key is not live
        """
        entry = self.entries.get(key)
        return entry.value if entry is not None else None

    def keys(self) -> List[str]:
        """
        Get all keys in recency order.

        Returns:
            List of keys from most recently used to least recently used
        """
        return list(self._iter_keys())

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "utilization": self.size / self.max_size if self.max_size > 0 else 0,
            "mru_key": self.head,
            "lru_key": self.tail,
        }

    def _iter_keys(self) -> Iterator[str]:
        current = self.head
        while current is not None:
            yield current
            current = self.entries[current].next

    def _move_to_front(self, entry: CacheEntry) -> None:
        if self.head == entry.key:
            return
        self._unlink(entry)
        self._link_front(entry)

    def _link_front(self, entry: CacheEntry) -> None:
        entry.prev = None
        entry.next = self.head
        if self.head is not None:
            self.entries[self.head].prev = entry.key
        self.head = entry.key
        if self.tail is None:
            self.tail = entry.key

    def _unlink(self, entry: CacheEntry) -> None:
        # Neighbours are looked up by key; the entry itself may already be
        # gone from the dict when this runs.
        if entry.prev is not None:
            self.entries[entry.prev].next = entry.next
        else:
            self.head = entry.next

        if entry.next is not None:
            self.entries[entry.next].prev = entry.prev
        else:
            self.tail = entry.prev

        entry.prev = None
        entry.next = None
