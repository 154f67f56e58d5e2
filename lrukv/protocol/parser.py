"""
Protocol Codec Module

This module handles decoding of raw RESP requests and encoding of replies.

Requests arrive either as a RESP array (what redis-cli and client
libraries send) or as an inline command typed into telnet/nc:

    *3\r\n$3\r\nset\r\n$3\r\nkey\r\n$5\r\nvalue\r\n
    set key value\r\n

Replies are always a single CRLF-terminated line:

    +OK            +PONG          +<value>
    :<n>           -ERR <message>
"""

import logging
from typing import Any, List, Tuple, Union

from ..errors import ProtocolError
from .commands import ArgType, Command, CommandType, ReplyType, Response

logger = logging.getLogger(__name__)

CRLF = b"\r\n"

# Nested arrays only ever appear as value payloads
MAX_NESTING = 32


def convert_to_type(data: str, arg_type: ArgType) -> Any:
    """
    Convert a token to the Python value its type marker calls for.

    Args:
        data: The token text (without its marker)
        arg_type: The type the token was sent as

    Returns:
        A list of lines for ARRAY, an int for INTEGER, the first line for
        SIMPLE_STRING and ERROR, the token unchanged for BULK_STRING
        (bulk strings are length-delimited and may contain CRLF) and for
        UNKNOWN.

    Raises:
        ValueError: If an INTEGER token is not an integer
    """
    if arg_type == ArgType.ARRAY:
        return data.split("\r\n")
    if arg_type == ArgType.INTEGER:
        return int(data.split("\r\n")[0])
    if arg_type in (ArgType.SIMPLE_STRING, ArgType.ERROR):
        return data.split("\r\n")[0]
    return data


class ProtocolParser:
    """
    Codec for the Redis serialization protocol (RESP).

    parse_request() never raises: anything it cannot decode comes back as
    a Command with type UNKNOWN, so the dispatcher can answer with an
    error reply instead of dropping the connection.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def parse_request(self, data: Union[bytes, str]) -> Command:
        """
        Decode one complete request.

        Args:
            data: Raw request bytes (or text) holding exactly one command

        Returns:
            Command object. type is UNKNOWN for unrecognized names and for
            malformed requests; name carries the offending token.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request(b"*2\\r\\n$3\\r\\nget\\r\\n$1\\r\\na\\r\\n")
            >>> cmd.type == CommandType.GET
            True
            >>> cmd.args
            ['a']
        """
        if isinstance(data, str):
            data = data.encode(self.encoding)
        raw = data.decode(self.encoding, errors="replace")

        if not data.strip():
            return Command(type=CommandType.UNKNOWN, raw=raw)

        request_type = ArgType.from_marker(raw)
        try:
            if request_type == ArgType.ARRAY:
                items, types = self._parse_array(data)
            else:
                items, types = self._parse_inline(data)
        except ProtocolError as exc:
            logger.debug(f"Malformed request {raw!r}: {exc}")
            return Command(type=CommandType.UNKNOWN, name=self._first_token(raw), raw=raw)

        if not items or not isinstance(items[0], str):
            return Command(type=CommandType.UNKNOWN, name=self._first_token(raw), raw=raw)

        name = items[0]
        arg_type = types[-1] if len(types) > 1 else request_type
        return Command(
            type=CommandType.from_name(name),
            name=name,
            args=items[1:],
            arg_type=arg_type,
            raw=raw,
        )

    def _parse_array(self, data: bytes) -> Tuple[List[Any], List[ArgType]]:
        """Decode a top-level RESP array into its elements and their types."""
        line, pos = self._read_line(data, 1)
        count = self._to_int(line)
        if count < 0:
            raise ProtocolError("null array")

        items: List[Any] = []
        types: List[ArgType] = []
        for _ in range(count):
            value, arg_type, pos = self._read_value(data, pos, depth=1)
            items.append(value)
            types.append(arg_type)

        if pos < len(data):
            # One request per read; anything after the first is dropped.
            logger.debug(f"Ignoring {len(data) - pos} trailing bytes")
        return items, types

    def _parse_inline(self, data: bytes) -> Tuple[List[Any], List[ArgType]]:
        """Decode a whitespace-separated inline command."""
        line = data.split(CRLF, 1)[0]
        tokens = [self._decode(token) for token in line.split()]
        return tokens, [ArgType.SIMPLE_STRING] * len(tokens)

    def _read_value(self, data: bytes, pos: int, depth: int) -> Tuple[Any, ArgType, int]:
        """Decode the RESP value starting at pos, depth arrays deep."""
        if depth > MAX_NESTING:
            raise ProtocolError("nesting too deep")
        if pos >= len(data):
            raise ProtocolError("truncated request")

        marker = chr(data[pos])
        arg_type = ArgType.from_marker(marker)
        if arg_type == ArgType.UNKNOWN:
            raise ProtocolError(f"unexpected type marker {marker!r}")
        line, pos = self._read_line(data, pos + 1)

        if arg_type == ArgType.BULK_STRING:
            length = self._to_int(line)
            if length < 0:
                raise ProtocolError("null bulk string")
            end = pos + length
            if data[end:end + 2] != CRLF:
                raise ProtocolError("bulk string length mismatch")
            text = self._decode(data[pos:end])
            return convert_to_type(text, arg_type), arg_type, end + 2

        if arg_type == ArgType.ARRAY:
            count = self._to_int(line)
            items = []
            for _ in range(max(count, 0)):
                value, _, pos = self._read_value(data, pos, depth + 1)
                items.append(value)
            return items, arg_type, pos

        if arg_type == ArgType.INTEGER:
            return self._to_int(line), arg_type, pos

        return convert_to_type(self._decode(line), arg_type), arg_type, pos

    def _read_line(self, data: bytes, pos: int) -> Tuple[bytes, int]:
        end = data.find(CRLF, pos)
        if end == -1:
            raise ProtocolError("missing CRLF terminator")
        return data[pos:end], end + 2

    def _decode(self, token: bytes) -> str:
        try:
            return token.decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise ProtocolError(f"invalid encoding: {exc}") from exc

    def _to_int(self, token: bytes) -> int:
        try:
            return int(token)
        except ValueError as exc:
            raise ProtocolError(f"expected integer, got {token!r}") from exc

    @staticmethod
    def _first_token(raw: str) -> str:
        """Best-effort command name for error replies."""
        if raw.startswith("*"):
            lines = raw.split("\r\n")
            return lines[2] if len(lines) > 2 else ""
        tokens = raw.split()
        return tokens[0] if tokens else ""

    def format_response(self, response: Response) -> bytes:
        """
        Encode a Response object as a single reply line.

        Args:
            response: Response object to format

        Returns:
            Reply bytes WITH trailing CRLF.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.ok())
            b'+OK\\r\\n'
            >>> parser.format_response(Response.integer(2))
            b':2\\r\\n'
            >>> parser.format_response(Response.error("invalid max size"))
            b'-ERR invalid max size\\r\\n'
            >>> parser.format_response(Response.value_response("a\\r\\nb"))
            b'+a\\\\r\\\\nb\\r\\n'
        """
        if response.type == ReplyType.ERROR:
            body = f"ERR {response.message}"
        elif response.value is not None:
            body = self._format_value(response.value)
        else:
            body = response.message

        # Values and echoed keys may hold CR/LF; a reply is always one line
        body = body.replace("\r", "\\r").replace("\n", "\\n")
        return f"{response.type.value}{body}".encode(self.encoding) + CRLF

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ",".join(ProtocolParser._format_value(item) for item in value)
        return str(value)

    def encode_request(self, *parts: Any) -> bytes:
        """
        Encode a command as a RESP array, the way redis-cli sends it.

        Strings become bulk strings, ints become RESP integers and lists
        become nested arrays.

        Examples:
            >>> ProtocolParser().encode_request("get", "a")
            b'*2\\r\\n$3\\r\\nget\\r\\n$1\\r\\na\\r\\n'
        """
        return b"*%d\r\n" % len(parts) + b"".join(self._encode_part(part) for part in parts)

    def _encode_part(self, part: Any) -> bytes:
        if isinstance(part, bool):
            part = str(part)
        if isinstance(part, int):
            return b":%d\r\n" % part
        if isinstance(part, (list, tuple)):
            return self.encode_request(*part)
        payload = str(part).encode(self.encoding)
        return b"$%d\r\n" % len(payload) + payload + CRLF
