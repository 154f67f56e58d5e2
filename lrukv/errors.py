"""LRU-KV exception hierarchy.

Command errors carry the text of the error reply sent back to the client.
"""


class LRUKVError(Exception):
    """Base exception for all LRU-KV errors."""


class ProtocolError(LRUKVError):
    """Raised by the codec when a request cannot be decoded."""


class CommandError(LRUKVError):
    """Raised by a command handler; str(exc) becomes the error reply."""


class UnknownKeyError(CommandError):
    """Raised when GET targets a key that is not live."""

    def __init__(self, key):
        super().__init__(f"unknown key '{key}'")
        self.key = key


class InvalidMaxSizeError(CommandError):
    """Raised when SET_MAX_LRU_SIZE is given an unusable capacity."""

    def __init__(self):
        super().__init__("invalid max size")


class UnknownCommandError(CommandError):
    """Raised for command names outside the dispatch table."""

    def __init__(self, name: str):
        super().__init__(f"unknown command '{name}'")
        self.name = name


class WrongArityError(CommandError):
    """Raised when a known command receives the wrong number of arguments."""

    def __init__(self, name: str):
        super().__init__(f"wrong number of arguments for '{name}' command")
        self.name = name
