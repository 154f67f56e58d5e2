"""Protocol module for LRU-KV."""

from .commands import ArgType, Command, CommandType, ReplyType, Response
from .dispatcher import CommandDispatcher
from .parser import ProtocolParser, convert_to_type

__all__ = [
    "ArgType",
    "Command",
    "CommandType",
    "CommandDispatcher",
    "ReplyType",
    "Response",
    "ProtocolParser",
    "convert_to_type",
]
