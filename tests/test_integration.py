"""
Integration Tests

End-to-end tests that verify the complete system works together.

Run with: python -m pytest tests/test_integration.py -v
"""

import asyncio

import pytest


@pytest.mark.asyncio
@pytest.mark.integration
class TestEndToEnd:
    """End-to-end integration tests."""

    async def test_complete_workflow(self, server, client_factory):
        async with client_factory() as client:
            assert await client.send_command("PING") == b"+PONG\r\n"

            assert await client.send_command("SET", "user:1", "alice") == b"+OK\r\n"
            assert await client.send_command("SET", "user:2", "bob") == b"+OK\r\n"

            assert await client.send_command("GET", "user:1") == b"+alice\r\n"
            assert await client.send_command("GET", "user:2") == b"+bob\r\n"
            assert await client.send_command("GET", "user:3") == b"$-1\r\n"

            assert await client.send_command("SET", "user:1", "alice_updated") == b"+OK\r\n"
            assert await client.send_command("GET", "user:1") == b"+alice_updated\r\n"

            # Errors don't disturb the session
            assert (await client.send_command("SET", "user:1")).startswith(b"-ERR")
            assert await client.send_command("GET", "user:1") == b"+alice_updated\r\n"

    @pytest.mark.slow
    async def test_ttl_through_server(self, server, client_factory):
        async with client_factory() as client:
            assert await client.send_command("SET", "temp", "value", "PX", "200") == b"+OK\r\n"
            assert await client.send_command("GET", "temp") == b"+value\r\n"

            await asyncio.sleep(0.3)

            assert await client.send_command("GET", "temp") == b"$-1\r\n"

    async def test_requests_answered_in_order(self, server, client_factory):
        async with client_factory() as client:
            for i in range(50):
                assert await client.send_command("ECHO", f"msg{i}") == f"+msg{i}\r\n".encode()

    async def test_binary_safe_value_length(self, server, client_factory):
        """Values with spaces survive the bulk-string framing."""
        async with client_factory() as client:
            await client.send_command("SET", "greeting", "hello world")
            assert await client.send_command("GET", "greeting") == b"+hello world\r\n"
