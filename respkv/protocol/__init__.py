"""Protocol module for RESP-KV."""

from .commands import Command, Reply, ReplyKind
from .errors import CommandError, CommandErrorKind, ProtocolError, ProtocolErrorKind
from .parser import ProtocolParser

__all__ = [
    "Command",
    "CommandError",
    "CommandErrorKind",
    "ProtocolError",
    "ProtocolErrorKind",
    "ProtocolParser",
    "Reply",
    "ReplyKind",
]
