"""
Protocol Command and Response Definitions

This module defines the data structures passed between the codec,
the dispatcher and the transport.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional


class CommandType(Enum):
    """Enumeration of supported command types."""
    INFO = auto()
    PING = auto()
    SET = auto()
    GET = auto()
    DEL = auto()
    SET_MAX_LRU_SIZE = auto()
    FLUSHDB = auto()
    DBSIZE = auto()
    QUIT = auto()
    UNKNOWN = auto()

    @classmethod
    def from_name(cls, name: str) -> "CommandType":
        """Look up a command by its wire name (case-insensitive)."""
        try:
            member = cls[name.upper()]
        except KeyError:
            return cls.UNKNOWN
        return member


class ArgType(Enum):
    """RESP type markers and the argument types they produce."""
    ARRAY = "*"
    BULK_STRING = "$"
    INTEGER = ":"
    SIMPLE_STRING = "+"
    ERROR = "-"
    UNKNOWN = ""

    @classmethod
    def from_marker(cls, data: str) -> "ArgType":
        """Classify data by its first character."""
        if not data:
            return cls.UNKNOWN
        for member in cls:
            if member.value and data[0] == member.value:
                return member
        return cls.UNKNOWN


class ReplyType(Enum):
    """Enumeration of reply kinds."""
    STATUS = "+"
    INTEGER = ":"
    ERROR = "-"


@dataclass
class Command:
    """
    Represents a decoded request.

    Attributes:
        type: The type of command (UNKNOWN for anything unrecognized)
        name: The command token exactly as the client sent it
        args: Decoded arguments following the command name
        arg_type: Type marker of the value argument (informational; args
            are already converted)
        raw: The original raw request string
    """
    type: CommandType
    name: str = ""
    args: List[Any] = field(default_factory=list)
    arg_type: ArgType = ArgType.UNKNOWN
    raw: str = ""


@dataclass
class Response:
    """
    Represents a protocol reply.

    Attributes:
        type: STATUS, INTEGER or ERROR
        message: Status text, or error description
        value: The value returned (GET replies and integer replies)
        close: Close the connection after the reply is written
    """
    type: ReplyType
    message: str = ""
    value: Optional[Any] = None
    close: bool = False

    @property
    def is_error(self) -> bool:
        return self.type == ReplyType.ERROR

    @classmethod
    def ok(cls) -> "Response":
        """Create the '+OK' acknowledgement."""
        return cls(type=ReplyType.STATUS, message="OK")

    @classmethod
    def pong(cls) -> "Response":
        """Create the '+PONG' acknowledgement."""
        return cls(type=ReplyType.STATUS, message="PONG")

    @classmethod
    def goodbye(cls) -> "Response":
        """Create the QUIT acknowledgement, which closes the connection."""
        return cls(type=ReplyType.STATUS, message="OK", close=True)

    @classmethod
    def value_response(cls, value: Any) -> "Response":
        """Create a GET response with a value."""
        return cls(type=ReplyType.STATUS, value=value)

    @classmethod
    def integer(cls, number: int) -> "Response":
        """Create an integer reply (DEL count, DBSIZE)."""
        return cls(type=ReplyType.INTEGER, value=number)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(type=ReplyType.ERROR, message=message)
