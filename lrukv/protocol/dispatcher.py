"""
Command Dispatcher Module

This module maps decoded commands onto cache operations.

Commands:
    INFO                      -> +OK
    PING                      -> +PONG
    SET <key> <value>         -> +OK
    GET <key>                 -> +<value> | -ERR unknown key '<key>'
    DEL <key> [key ...]       -> :<number of keys removed>
    SET_MAX_LRU_SIZE <n>      -> +OK | -ERR invalid max size
    FLUSHDB                   -> +OK
    DBSIZE                    -> :<number of keys>
    QUIT                      -> +OK (connection closed)
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from ..cache.store import CacheStore
from ..errors import (
    CommandError,
    InvalidMaxSizeError,
    UnknownCommandError,
    UnknownKeyError,
    WrongArityError,
)
from .commands import Command, CommandType, Response

logger = logging.getLogger(__name__)

# (min args, max args); None means unbounded
ARITY: Dict[CommandType, Tuple[int, Optional[int]]] = {
    CommandType.INFO: (0, None),
    CommandType.PING: (0, None),
    CommandType.SET: (2, 2),
    CommandType.GET: (1, 1),
    CommandType.DEL: (1, None),
    CommandType.SET_MAX_LRU_SIZE: (1, 1),
    CommandType.FLUSHDB: (0, None),
    CommandType.DBSIZE: (0, 0),
    CommandType.QUIT: (0, 0),
}


class CommandDispatcher:
    """
    Executes decoded commands against the shared cache store.

    The dispatcher holds no per-connection state, so one instance serves
    every connection. All failures surface as error replies; dispatch()
    itself only raises for programming errors.

    Attributes:
        store: The CacheStore shared by all connections
    """

    def __init__(self, store: CacheStore):
        self.store = store
        self._handlers: Dict[CommandType, Callable[[Command], Response]] = {
            CommandType.INFO: self._handle_info,
            CommandType.PING: self._handle_ping,
            CommandType.SET: self._handle_set,
            CommandType.GET: self._handle_get,
            CommandType.DEL: self._handle_del,
            CommandType.SET_MAX_LRU_SIZE: self._handle_set_max_lru_size,
            CommandType.FLUSHDB: self._handle_flushdb,
            CommandType.DBSIZE: self._handle_dbsize,
            CommandType.QUIT: self._handle_quit,
        }

    def dispatch(self, command: Command) -> Response:
        """
        Execute a command and build its reply.

        Args:
            command: The decoded Command

        Returns:
            Response for the client; an error Response for unknown
            commands, bad arguments and missing keys
        """
        try:
            return self._execute(command)
        except CommandError as exc:
            return Response.error(str(exc))

    def _execute(self, command: Command) -> Response:
        handler = self._handlers.get(command.type)
        if handler is None:
            logger.debug(f"Unknown command {command.name!r}")
            raise UnknownCommandError(command.name)

        low, high = ARITY[command.type]
        count = len(command.args)
        if count < low or (high is not None and count > high):
            raise WrongArityError(command.name.lower())

        return handler(command)

    def _handle_info(self, command: Command) -> Response:
        return Response.ok()

    def _handle_ping(self, command: Command) -> Response:
        return Response.pong()

    def _handle_set(self, command: Command) -> Response:
        key, value = self._key(command.args[0]), command.args[1]
        evicted = self.store.set(key, value)
        if evicted is not None:
            logger.debug(f"Evicted {evicted!r} to make room for {key!r}")
        return Response.ok()

    def _handle_get(self, command: Command) -> Response:
        key = self._key(command.args[0])
        value = self.store.get(key)
        if value is None:
            raise UnknownKeyError(key)
        return Response.value_response(value)

    def _handle_del(self, command: Command) -> Response:
        removed = 0
        for arg in command.args:
            if self.store.delete(self._key(arg)):
                removed += 1
        return Response.integer(removed)

    def _handle_set_max_lru_size(self, command: Command) -> Response:
        max_size = self._capacity(command.args[0])

        # Check and update under one lock so a concurrent SET cannot slip in
        with self.store.locked() as cache:
            if max_size < 1 or max_size < cache.size:
                raise InvalidMaxSizeError()
            cache.set_max_size(max_size)

        logger.info(f"LRU max size set to {max_size}")
        return Response.ok()

    def _handle_flushdb(self, command: Command) -> Response:
        self.store.flush()
        return Response.ok()

    def _handle_dbsize(self, command: Command) -> Response:
        return Response.integer(self.store.size())

    def _handle_quit(self, command: Command) -> Response:
        return Response.goodbye()

    @staticmethod
    def _key(arg: Any) -> str:
        return arg if isinstance(arg, str) else str(arg)

    @staticmethod
    def _capacity(arg: Any) -> int:
        if isinstance(arg, bool):
            raise InvalidMaxSizeError()
        try:
            return int(arg)
        except (TypeError, ValueError):
            raise InvalidMaxSizeError() from None
