"""Network transport for LRU-KV."""
