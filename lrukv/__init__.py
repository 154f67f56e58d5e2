"""
LRU-KV: Redis-Compatible LRU Cache Server

A small key-value server speaking the Redis wire protocol (RESP),
backed by a bounded least-recently-used cache and built on Python asyncio.
"""

__version__ = "1.0.0"
