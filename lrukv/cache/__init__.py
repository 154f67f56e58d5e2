"""Cache module for LRU-KV."""

from .lru import CacheEntry, LRUCache
from .store import CacheStore

__all__ = ["CacheEntry", "CacheStore", "LRUCache"]
