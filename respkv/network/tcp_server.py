"""
Async TCP Server Module

This module implements the asynchronous TCP server for RESP-KV.

Each accepted connection runs handle_client() in its own coroutine:
read until one request is complete, execute it, write one reply, repeat.
All connections share a single SharedStore.
"""

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from typing import Optional

from ..cache.shared import SharedStore
from ..config.settings import settings
from ..engine.executor import CommandExecutor
from ..protocol.commands import Reply
from ..protocol.errors import ProtocolError, ProtocolErrorKind
from ..protocol.parser import ProtocolParser

logger = logging.getLogger(__name__)


class KVServer:
    """
    Asynchronous TCP server for the RESP-KV service.

    Features:
    - Non-blocking I/O with asyncio
    - Persistent connections (one request at a time, reassembled across reads)
    - Protocol errors answered with an error reply, connection kept open
    - Shared, lock-guarded store across all connections
    - Optional periodic sweep of expired keys

    Usage:
        server = KVServer(host='127.0.0.1', port=6379)
        await server.start()  # Runs forever

    Attributes:
        host: Server bind address
        port: Server port number
        store: The SharedStore used by all connections
        parser: The ProtocolParser for decoding requests and encoding replies
        executor: The CommandExecutor bound to the store
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: SharedStore = None,
            cleanup_interval: float = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings; 0 picks a free port)
            store: SharedStore instance (creates new one if not provided)
            cleanup_interval: Seconds between expiry sweeps (0 disables)
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else SharedStore()
        self.cleanup_interval = (
            cleanup_interval if cleanup_interval is not None else settings.CLEANUP_INTERVAL
        )
        self.parser = ProtocolParser()
        self.executor = CommandExecutor(self.store)

        # Server state
        self._server: Optional[asyncio.Server] = None
        self._cleanup_task: Optional[asyncio.Task] = None
        self._running = False
        self._connection_count = 0
        self._total_requests = 0
        self._protocol_errors = 0

    async def handle_client(
            self,
            reader: StreamReader,
            writer: StreamWriter
    ) -> None:
        """
        Handle a single client connection.

        Protocol flow:
            1. Read up to READ_BUFFER_SIZE bytes; an empty read means the
               client closed the connection
            2. Append to the pending buffer; if the request is still
               incomplete and under MAX_REQUEST_SIZE, keep reading
            3. Decode and build a Command (ProtocolError -> error reply)
            4. Execute the command against the shared store
            5. Encode and send exactly one reply, clear the buffer, repeat

        A request still incomplete at MAX_REQUEST_SIZE gets one error reply
        and the connection is closed. Transport errors close only this
        connection.
        """
        addr = writer.get_extra_info('peername')
        self._connection_count += 1
        logger.debug(f"Client connected: {addr}")

        buffer = bytearray()
        try:
            while True:
                data = await reader.read(settings.READ_BUFFER_SIZE)
                if not data:
                    logger.debug(f"Client disconnected: {addr}")
                    break

                buffer += data
                oversized = len(buffer) >= settings.MAX_REQUEST_SIZE
                reply = await self.process(bytes(buffer), more_expected=not oversized)
                if reply is None:
                    continue

                buffer.clear()
                writer.write(self.parser.format_response(reply))
                await writer.drain()

                if oversized and reply.is_error:
                    logger.debug(f"Closing {addr}: request exceeds {settings.MAX_REQUEST_SIZE} bytes")
                    break

        except (ConnectionResetError, BrokenPipeError):
            logger.debug(f"Connection reset by client: {addr}")
        except Exception as exc:  # Log unexpected errors but keep server alive
            logger.exception(f"Error handling client {addr}: {exc}")
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def process(self, data: bytes, more_expected: bool = False) -> Optional[Reply]:
        """
        Turn one request buffer into one reply.

        Args:
            data: Raw bytes of the pending request
            more_expected: The rest of an incomplete request may still arrive

        Returns:
            The Reply to send (errors included; never raises for bad input),
            or None when more_expected and the request is incomplete.
        """
        try:
            command = self.parser.parse_request(data, require_complete=more_expected)
        except ProtocolError as exc:
            if more_expected and exc.kind == ProtocolErrorKind.TRUNCATED:
                return None
            self._protocol_errors += 1
            logger.debug(f"Protocol error ({exc.kind.name}): {exc.detail}")
            return Reply.error(exc.reply_message)

        if command is None:
            return Reply.error("ERR empty command")

        self._total_requests += 1
        return await self.executor.execute(command)

    async def _cleanup_loop(self) -> None:
        """Periodically purge expired keys."""
        while True:
            await asyncio.sleep(self.cleanup_interval)
            try:
                removed = await self.store.cleanup_expired()
            except Exception as exc:  # Keep sweeping after a failure
                logger.exception(f"Expiry sweep failed: {exc}")
                continue
            if removed:
                logger.debug(f"Expiry sweep removed {removed} keys")

    async def start(self) -> None:
        """
        Start the server and begin accepting connections.

        Runs forever (or until cancelled/stopped).

        Example:
            server = KVServer(port=6379)
            asyncio.run(server.start())
        """
        if self._running:
            return

        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
        )
        self._running = True

        if self._server.sockets:
            self.port = self._server.sockets[0].getsockname()[1]
        addrs = ', '.join(str(sock.getsockname()) for sock in self._server.sockets or [])
        logger.info(f"Serving on {addrs}")

        if self.cleanup_interval and self.cleanup_interval > 0:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())

        try:
            async with self._server:
                await self._server.serve_forever()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False
            await self._stop_cleanup()

    async def _stop_cleanup(self) -> None:
        if self._cleanup_task is None:
            return
        self._cleanup_task.cancel()
        try:
            await self._cleanup_task
        except asyncio.CancelledError:
            pass
        self._cleanup_task = None

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Closes the listener and waits for it to fully shut down.
        """
        await self._stop_cleanup()

        if self._server is None:
            return

        self._server.close()
        try:
            await self._server.wait_closed()
        finally:
            self._server = None
            self._running = False

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    async def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with connection/request counts and store statistics.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_connections": self._connection_count,
            "total_requests": self._total_requests,
            "protocol_errors": self._protocol_errors,
            "store_stats": await self.store.get_stats(),
        }

