"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
from contextlib import closing
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio

from respkv.cache.shared import SharedStore
from respkv.cache.store import KVStore
from respkv.engine.executor import CommandExecutor
from respkv.network.tcp_server import KVServer
from respkv.protocol.parser import ProtocolParser


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class FakeClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> KVStore:
    """Create a fresh KVStore driven by the fake clock."""
    return KVStore(clock=clock)


@pytest.fixture
def shared_store(store: KVStore) -> SharedStore:
    return SharedStore(store)


# ============================================================================
# Protocol / Engine Fixtures
# ============================================================================

@pytest.fixture
def parser() -> ProtocolParser:
    """Create a ProtocolParser instance."""
    return ProtocolParser()


@pytest.fixture
def executor(shared_store: SharedStore) -> CommandExecutor:
    return CommandExecutor(shared_store)


# ============================================================================
# Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[KVServer, None]:
    """
    Create and start a server instance for testing.

    This fixture:
    1. Creates a KVServer on a random free port
    2. Starts it in a background task
    3. Yields the server for testing
    4. Cleans up after the test
    """
    srv = KVServer(host='127.0.0.1', port=server_port, cleanup_interval=0)

    server_task = asyncio.create_task(srv.start())

    # Wait for server to be ready
    await asyncio.sleep(0.1)

    yield srv

    await srv.stop()
    server_task.cancel()
    try:
        await server_task
    except asyncio.CancelledError:
        pass


# ============================================================================
# Client Fixtures
# ============================================================================

class AsyncClient:
    """
    Helper class for testing server interactions.

    Usage:
        async with AsyncClient('127.0.0.1', port) as client:
            reply = await client.send_command("SET", "key", "value")
            assert reply == b"+OK\\r\\n"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader = None
        self.writer = None
        self.parser = ProtocolParser()

    async def connect(self) -> None:
        """Establish connection to server."""
        self.reader, self.writer = await asyncio.open_connection(
            self.host, self.port
        )

    async def disconnect(self) -> None:
        """Close connection to server."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass

    async def send_raw(self, data: bytes) -> bytes:
        """Send raw bytes and return one CRLF-terminated reply."""
        self.writer.write(data)
        await self.writer.drain()
        return await asyncio.wait_for(self.reader.readline(), timeout=2)

    async def send_command(self, *tokens: Optional[str]) -> bytes:
        """Encode tokens as a RESP array, send it, return the raw reply."""
        return await self.send_raw(self.parser.encode_request(list(tokens)))

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


@pytest.fixture
def client_factory(server_port: int):
    """
    Factory fixture to create test clients.

    Usage:
        async def test_something(server, client_factory):
            async with client_factory() as client:
                reply = await client.send_command("GET", "key")
    """
    def factory() -> AsyncClient:
        return AsyncClient('127.0.0.1', server_port)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
