"""
Command Engine Module

Interprets a decoded Command against the shared store and produces a Reply.

Supported commands:
    PING                     -> +PONG
    ECHO [message]           -> +<message>
    SET key value            -> +OK
    SET key value PX millis  -> +OK (expires after millis)
    GET key                  -> +<value> | $-1
"""

import logging
from typing import Awaitable, Callable, Dict

from ..cache.shared import SharedStore
from ..protocol.commands import Command, Reply
from ..protocol.errors import CommandError, CommandErrorKind

logger = logging.getLogger(__name__)

Handler = Callable[[Command], Awaitable[Reply]]


class CommandExecutor:
    """
    Dispatches commands to their handlers by upper-cased name.

    Only SET mutates the store. Handlers raise CommandError for bad input;
    execute() turns those into error replies so client mistakes never
    escape as exceptions.

    Usage:
        executor = CommandExecutor(SharedStore())
        reply = await executor.execute(Command("PING"))
    """

    def __init__(self, store: SharedStore):
        self.store = store
        self._handlers: Dict[str, Handler] = {
            "PING": self._ping,
            "ECHO": self._echo,
            "SET": self._set,
            "GET": self._get,
        }

    async def execute(self, command: Command) -> Reply:
        """
        Execute a command.

        Args:
            command: The Command to run

        Returns:
            Reply to send back to the client (never raises for bad input)
        """
        handler = self._handlers.get(command.upper_name)

        try:
            if handler is None:
                raise CommandError(
                    CommandErrorKind.UNKNOWN_COMMAND,
                    f"ERR unknown command '{command.name}'",
                )
            return await handler(command)
        except CommandError as exc:
            logger.debug(f"Command {command.name!r} rejected: {exc.kind.name}")
            return Reply.error(exc.message)

    async def _ping(self, command: Command) -> Reply:
        return Reply.pong()

    async def _echo(self, command: Command) -> Reply:
        # Missing argument echoes an empty status rather than an error
        return Reply.simple(command.args[0] if command.args else "")

    async def _set(self, command: Command) -> Reply:
        args = command.args
        if len(args) == 2:
            key, value = args
            await self.store.set(key, value)
            return Reply.ok()

        if len(args) == 4:
            # args[2] is the expiry option keyword; only its position matters
            key, value, _, raw_ttl = args
            ttl_ms = self._parse_millis(raw_ttl)
            await self.store.set_with_expiry(key, value, ttl_ms)
            return Reply.ok()

        raise CommandError(
            CommandErrorKind.WRONG_ARITY,
            "ERR wrong number of arguments for 'set' command, expected exactly 2",
        )

    async def _get(self, command: Command) -> Reply:
        if len(command.args) != 1:
            raise CommandError(
                CommandErrorKind.WRONG_ARITY,
                "ERR wrong number of arguments for 'get' command, expected exactly 1",
            )

        value = await self.store.get(command.args[0])
        return Reply.simple(value) if value is not None else Reply.null()

    @staticmethod
    def _parse_millis(raw: str) -> int:
        """Parse a non-negative integer millisecond count."""
        if not (raw.isascii() and raw.isdigit()):
            raise CommandError(
                CommandErrorKind.INVALID_ARGUMENT,
                "ERR value is not an integer or out of range",
            )
        return int(raw)
