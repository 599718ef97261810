"""
Protocol Parser Module

This module turns raw request bytes into Commands and Replies into bytes.

Request format (RESP array of bulk strings):
    *<argc>\\r\\n
    $<len>\\r\\n<bytes>\\r\\n   (repeated)

Reply format:
    +<text>\\r\\n     simple status
    -<message>\\r\\n  error
    $-1\\r\\n         null (absent key)
"""

import logging
import re
from typing import List, Optional, Tuple

from .commands import Command, Reply, ReplyKind
from .errors import ProtocolError, ProtocolErrorKind

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
ARRAY_MARKER = b"*"
BULK_MARKER = b"$"
SIMPLE_MARKER = b"+"
ERROR_MARKER = b"-"
NULL_BULK = b"$-1\r\n"
NULL_LENGTH = -1
LENGTH_PATTERN = re.compile(rb"-?[0-9]+")


class ProtocolParser:
    """
    Parser for the RESP request subset spoken by RESP-KV.

    Decoding is a single left-to-right scan over one buffered request.
    Only one request per buffer is decoded; bytes after the declared number
    of elements are ignored.

    Usage:
        parser = ProtocolParser()
        command = parser.parse_request(b"*1\\r\\n$4\\r\\nPING\\r\\n")
        data = parser.format_response(Reply.pong())
    """

    def decode(self, data: bytes, require_complete: bool = False) -> Optional[List[Optional[str]]]:
        """
        Decode a raw buffer into a sequence of optional strings.

        Args:
            data: Raw bytes received from the client
            require_complete: Treat fewer elements than declared as TRUNCATED
                instead of returning the elements read so far

        Returns:
            None for a null request (``*-1``), otherwise the list of tokens,
            where a null bulk string (``$-1``) is represented as None.

        Raises:
            ProtocolError: EMPTY_INPUT, BAD_LENGTH or TRUNCATED.

        Examples:
            >>> ProtocolParser().decode(b"*2\\r\\n$4\\r\\nPING\\r\\n$4\\r\\nPONG\\r\\n")
            ['PING', 'PONG']
            >>> ProtocolParser().decode(b"*0\\r\\n")
            []
            >>> ProtocolParser().decode(b"*-1\\r\\n") is None
            True
        """
        if not data:
            raise ProtocolError(ProtocolErrorKind.EMPTY_INPUT, "empty request")

        if data[:1] != ARRAY_MARKER:
            raise ProtocolError(
                ProtocolErrorKind.BAD_LENGTH,
                f"expected '*', got {data[:1]!r}",
            )

        count, pos = self._read_length(data, 1)
        if count == NULL_LENGTH:
            return None
        if count < NULL_LENGTH:
            raise ProtocolError(ProtocolErrorKind.BAD_LENGTH, f"invalid multibulk length {count}")

        tokens: List[Optional[str]] = []
        while len(tokens) < count and pos < len(data):
            token, pos = self._read_bulk(data, pos)
            tokens.append(token)

        if require_complete and len(tokens) < count:
            raise ProtocolError(
                ProtocolErrorKind.TRUNCATED,
                f"expected {count} elements, got {len(tokens)}",
            )

        if pos < len(data):
            logger.debug(f"Ignoring {len(data) - pos} trailing bytes after request")

        return tokens

    def _read_length(self, data: bytes, start: int) -> Tuple[int, int]:
        """
        Read a signed decimal length terminated by CRLF.

        Returns:
            (length, position just past the CRLF)
        """
        end = data.find(CRLF, start)
        if end == -1:
            raise ProtocolError(ProtocolErrorKind.TRUNCATED, "length prefix not terminated")

        raw = data[start:end]
        if not LENGTH_PATTERN.fullmatch(raw):
            raise ProtocolError(
                ProtocolErrorKind.BAD_LENGTH,
                f"invalid length {raw.decode('utf-8', errors='replace')!r}",
            )

        return int(raw), end + len(CRLF)

    def _read_bulk(self, data: bytes, pos: int) -> Tuple[Optional[str], int]:
        """Read one bulk string starting at pos."""
        if data[pos:pos + 1] != BULK_MARKER:
            raise ProtocolError(
                ProtocolErrorKind.BAD_LENGTH,
                f"expected '$', got {data[pos:pos + 1]!r}",
            )

        length, pos = self._read_length(data, pos + 1)
        if length == NULL_LENGTH:
            return None, pos
        if length < NULL_LENGTH:
            raise ProtocolError(ProtocolErrorKind.BAD_LENGTH, f"invalid bulk length {length}")

        end = pos + length
        if end + len(CRLF) > len(data):
            raise ProtocolError(
                ProtocolErrorKind.TRUNCATED,
                f"bulk string of length {length} exceeds buffer",
            )
        if data[end:end + len(CRLF)] != CRLF:
            raise ProtocolError(
                ProtocolErrorKind.BAD_LENGTH,
                f"bulk length {length} does not match content",
            )

        return data[pos:end].decode("utf-8", errors="replace"), end + len(CRLF)

    def build_command(self, tokens: List[Optional[str]]) -> Command:
        """Build a Command from decoded tokens (see Command.from_tokens)."""
        return Command.from_tokens(tokens)

    def parse_request(self, data: bytes, require_complete: bool = False) -> Optional[Command]:
        """
        Decode a buffer and build a Command from it.

        Returns:
            The Command, or None when the request carried no command
            (null array or empty array).

        Raises:
            ProtocolError: if decoding or command construction fails.
        """
        tokens = self.decode(data, require_complete=require_complete)
        if not tokens:
            return None
        return self.build_command(tokens)

    def format_response(self, reply: Reply) -> bytes:
        """
        Encode a Reply into wire bytes.

        Examples:
            >>> ProtocolParser().format_response(Reply.pong())
            b'+PONG\\r\\n'
            >>> ProtocolParser().format_response(Reply.null())
            b'$-1\\r\\n'
        """
        if reply.kind == ReplyKind.NULL:
            return NULL_BULK

        prefix = ERROR_MARKER if reply.kind == ReplyKind.ERROR else SIMPLE_MARKER
        return prefix + reply.message.encode("utf-8") + CRLF

    def encode_request(self, tokens: Optional[List[Optional[str]]]) -> bytes:
        """
        Encode tokens as a RESP request (client side).

        Examples:
            >>> ProtocolParser().encode_request(["GET", "foo"])
            b'*2\\r\\n$3\\r\\nGET\\r\\n$3\\r\\nfoo\\r\\n'
        """
        if tokens is None:
            return ARRAY_MARKER + b"-1" + CRLF

        parts = [ARRAY_MARKER + str(len(tokens)).encode() + CRLF]
        for token in tokens:
            if token is None:
                parts.append(NULL_BULK)
                continue
            body = token.encode("utf-8")
            parts.append(BULK_MARKER + str(len(body)).encode() + CRLF + body + CRLF)
        return b"".join(parts)
