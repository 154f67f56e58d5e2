"""Configuration for LRU-KV."""
