"""
Protocol and command error types.

ProtocolError is raised while turning raw bytes into a Command.
CommandError is raised by command handlers and turned into an error reply.
Neither is fatal to a connection.
"""

from enum import Enum, auto


class ProtocolErrorKind(Enum):
    """Reasons a request could not be decoded into a Command."""
    EMPTY_INPUT = auto()
    BAD_LENGTH = auto()
    TRUNCATED = auto()
    NULL_COMMAND_NAME = auto()
    NULL_ARGUMENT = auto()


class CommandErrorKind(Enum):
    """Reasons a well-formed Command could not be executed."""
    WRONG_ARITY = auto()
    INVALID_ARGUMENT = auto()
    UNKNOWN_COMMAND = auto()


class ProtocolError(Exception):
    """Malformed request bytes or an unusable token sequence."""

    def __init__(self, kind: ProtocolErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail or kind.name.lower().replace("_", " ")
        super().__init__(self.detail)

    @property
    def reply_message(self) -> str:
        return f"ERR Protocol error: {self.detail}"


class CommandError(Exception):
    """A command that was decoded fine but cannot be carried out."""

    def __init__(self, kind: CommandErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)
