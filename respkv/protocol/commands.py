"""
Protocol Command and Reply Definitions

This module defines the data structures for decoded commands and the
replies produced by the command engine.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from .errors import ProtocolError, ProtocolErrorKind


class ReplyKind(Enum):
    """Enumeration of reply types understood by the encoder."""
    SIMPLE = auto()
    ERROR = auto()
    NULL = auto()


@dataclass
class Command:
    """
    Represents a decoded request.

    Attributes:
        name: The command name exactly as the client sent it
        args: Positional arguments following the name
    """
    name: str
    args: List[str] = field(default_factory=list)

    @property
    def upper_name(self) -> str:
        """Case-insensitive dispatch key."""
        return self.name.upper()

    @classmethod
    def from_tokens(cls, tokens: List[Optional[str]]) -> "Command":
        """
        Build a Command from a decoded token sequence.

        Args:
            tokens: Output of ProtocolParser.decode (must not be None)

        Returns:
            Command whose name is the first token and args the rest.

        Raises:
            ProtocolError: NULL_COMMAND_NAME if the sequence is empty or the
                first token is null, NULL_ARGUMENT if any later token is null.

        Examples:
            >>> Command.from_tokens(["SET", "k", "v"])
            Command(name='SET', args=['k', 'v'])
        """
        if not tokens or tokens[0] is None:
            raise ProtocolError(ProtocolErrorKind.NULL_COMMAND_NAME, "missing command name")

        args = []
        for position, token in enumerate(tokens[1:], start=1):
            if token is None:
                raise ProtocolError(
                    ProtocolErrorKind.NULL_ARGUMENT,
                    f"null argument at position {position}",
                )
            args.append(token)

        return cls(name=tokens[0], args=args)


@dataclass
class Reply:
    """
    Represents a protocol reply.

    Attributes:
        kind: SIMPLE, ERROR or NULL
        message: Status text or error message (unused for NULL)
    """
    kind: ReplyKind
    message: str = ""

    @classmethod
    def simple(cls, message: str = "") -> "Reply":
        """Create a simple status reply."""
        return cls(kind=ReplyKind.SIMPLE, message=message)

    @classmethod
    def error(cls, message: str) -> "Reply":
        """Create an error reply."""
        return cls(kind=ReplyKind.ERROR, message=message)

    @classmethod
    def null(cls) -> "Reply":
        """Create a null reply (absent key)."""
        return cls(kind=ReplyKind.NULL)

    @classmethod
    def ok(cls) -> "Reply":
        return cls.simple("OK")

    @classmethod
    def pong(cls) -> "Reply":
        return cls.simple("PONG")

    @property
    def is_error(self) -> bool:
        return self.kind == ReplyKind.ERROR
