"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import pytest
import pytest_asyncio
from contextlib import closing
from typing import AsyncGenerator

from lrukv.cache.lru import LRUCache
from lrukv.cache.store import CacheStore
from lrukv.network.tcp_server import LRUServer
from lrukv.protocol.dispatcher import CommandDispatcher
from lrukv.protocol.parser import ProtocolParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def lru_cache() -> LRUCache:
    """Create an LRU cache for testing (5 items max)."""
    return LRUCache(max_size=5)


@pytest.fixture
def store() -> CacheStore:
    """Create a fresh CacheStore with capacity for 100 keys."""
    return CacheStore(max_size=100)


@pytest.fixture
def small_store() -> CacheStore:
    """Create a CacheStore with small capacity for eviction testing (5 keys)."""
    return CacheStore(max_size=5)


# ============================================================================
# Protocol Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


@pytest.fixture
def dispatcher(store: CacheStore) -> CommandDispatcher:
    """Create a dispatcher over the 100-key store."""
    return CommandDispatcher(store)


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[LRUServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates an LRUServer on a random free port (capacity 100)
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = LRUServer(host='127.0.0.1', port=server_port, store=CacheStore(max_size=100))

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Commands are sent as RESP arrays and the single reply line is
    returned without its CRLF.

    Usage:
        async with AsyncClient('127.0.0.1', 6379) as client:
            response = await client.send_command("set", "key", "value")
            assert response == "+OK"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None
        self.parser = ProtocolParser()

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass

    async def send_command(self, *parts) -> str:
        """Send a command as a RESP array and receive the reply line."""
        return await self.send_raw(self.parser.encode_request(*parts))

    async def send_raw(self, data: bytes) -> str:
        """Send raw bytes and receive the reply line."""
        self.writer.write(data)
        await self.writer.drain()

        response = await self.reader.readline()
        return response.decode().rstrip('\r\n')

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                response = await client.send_command("get", "key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
