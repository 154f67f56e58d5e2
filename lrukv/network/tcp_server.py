"""
Async TCP Server Module

This module implements the asynchronous TCP transport for LRU-KV.

Each accepted connection gets its own handle_client() coroutine. A
request is expected to arrive whole in a single read; it is decoded,
dispatched against the shared cache, and answered before the next read.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..cache.store import CacheStore
from ..config.settings import settings
from ..protocol.dispatcher import CommandDispatcher
from ..protocol.parser import ProtocolParser

logger = logging.getLogger(__name__)


class LRUServer:
    """
    Asynchronous TCP server for the LRU-KV service.

    This server handles multiple concurrent clients using asyncio.
    Each client connection is handled in a separate coroutine, and all
    of them share one CacheStore through one CommandDispatcher.

    Usage:
        server = LRUServer(host='0.0.0.0', port=6379)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 6379)
        store: The CacheStore instance shared by all connections
        parser: The ProtocolParser for decoding requests and encoding replies
        dispatcher: The CommandDispatcher executing commands on the store
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: CacheStore = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            store: CacheStore instance (creates new one if not provided)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else CacheStore()
        self.parser = ProtocolParser()
        self.dispatcher = CommandDispatcher(self.store)

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Reads requests until the client disconnects or sends QUIT. Errors
        in a request become error replies; the connection stays open.

        Args:
            reader: StreamReader for reading from the client
            writer: StreamWriter for writing to the client
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        try:
            while True:
                data = await reader.read(settings.READ_BUFFER_SIZE)
                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                command = self.parser.parse_request(data)
                self._total_requests += 1
                response = self.dispatcher.dispatch(command)

                writer.write(self.parser.format_response(response))
                await writer.drain()

                if response.close:
                    logger.debug(f"Client requested quit: {addr}")
                    break

        except ConnectionResetError:
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs forever (or until cancelled). Call it from asyncio.run()
        or within an existing event loop.

        Example:
            server = LRUServer(port=6379)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
        )
        self._running = True

        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Closes the server and waits for it to fully shut down.
        """
        if self._server is None:
            return

        self._server.close()
        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server stats including connection counts,
            request counts, and cache statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "cache_stats": self.store.get_stats(),
        }


async def run_server(host: str = None, port: int = None, max_size: int = None) -> None:
    """
    Convenience function to create and run the server.

    Args:
        host: Bind address (default from settings)
        port: Port number (default from settings)
        max_size: Initial LRU capacity (default from settings)

    Usage:
        asyncio.run(run_server(port=6379))
    """
    server = LRUServer(host=host, port=port, store=CacheStore(max_size=max_size))

    try:
        await server.start()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()
