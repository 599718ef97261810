#!/usr/bin/env python3
"""
Interactive Test Client for RESP-KV

A simple command-line client for manually testing the RESP-KV server.
Each typed line is split on whitespace and sent as a RESP array.

Usage:
    python scripts/client.py                  # Connect to localhost:6379
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 6380      # Connect to specific port

Commands:
    PING                      - Health check
    ECHO <message>            - Echo a message back
    SET <key> <value>         - Store a key-value pair
    SET <key> <value> PX <ms> - Store with expiry in milliseconds
    GET <key>                 - Retrieve a value
    help                      - Show this help
    exit                      - Exit client
"""

import argparse
import socket
import sys

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default

from respkv.protocol.parser import ProtocolParser


class RespKVClient:
    """Simple TCP client for RESP-KV."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.socket = None
        self.parser = ProtocolParser()

    def connect(self) -> bool:
        """Connect to the server."""
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=self.timeout)
            return True
        except OSError as e:
            print(f"Connection error: {e}")
            return False

    def disconnect(self):
        """Disconnect from the server."""
        if self.socket:
            try:
                self.socket.close()
            except OSError:
                pass
            self.socket = None

    def send_command(self, command: str) -> str:
        """Send a command line and return the reply in readable form."""
        if not self.socket:
            return "(error) Not connected"

        try:
            self.socket.sendall(self.parser.encode_request(command.split()))

            # Every reply is a single CRLF-terminated line
            response = b''
            while not response.endswith(b'\r\n'):
                chunk = self.socket.recv(4096)
                if not chunk:
                    return "(error) Connection closed by server"
                response += chunk

            return format_reply(response)

        except socket.timeout:
            return "(error) Request timed out"
        except OSError as e:
            return f"(error) {e}"

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def format_reply(raw: bytes) -> str:
    """Render a raw reply the way redis-cli does."""
    text = raw.decode('utf-8', errors='replace').rstrip('\r\n')
    if text == "$-1":
        return "(nil)"
    if text.startswith("-"):
        return f"(error) {text[1:]}"
    if text.startswith("+"):
        return text[1:]
    return text


def print_help():
    """Print help message."""
    print("""
RESP-KV Commands:
-----------------
  PING                        Check the server is alive
  ECHO <message>              Echo a message back
  SET <key> <value>           Store a key-value pair
  SET <key> <value> PX <ms>   Store with an expiry in milliseconds
  GET <key>                   Retrieve the value for a key

Client Commands:
----------------
  help                        Show this help message
  exit                        Exit the client
  reconnect                   Reconnect to the server
  status                      Show connection status

Examples:
---------
  SET mykey myvalue           Store "myvalue" under "mykey"
  SET tempkey tempval PX 500  Store for 500 milliseconds
  GET mykey                   Get value for "mykey"
""")


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for RESP-KV"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=6379,
        help="Server port (default: 6379)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Socket timeout in seconds (default: 5.0)"
    )

    args = parser.parse_args()

    print("RESP-KV Client")
    print("==============")
    print(f"Connecting to {args.host}:{args.port}...")

    client = RespKVClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m respkv.server --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()

                if not command:
                    continue

                lower_cmd = command.lower()

                if lower_cmd == "help":
                    print_help()
                    continue

                if lower_cmd in ("exit", "quit"):
                    print("Goodbye!")
                    break

                if lower_cmd == "reconnect":
                    client.disconnect()
                    if client.connect():
                        print("Reconnected!")
                    else:
                        print("Reconnection failed.")
                    continue

                if lower_cmd == "status":
                    status = "Connected" if client.socket else "Disconnected"
                    print(f"Status: {status}")
                    print(f"Server: {args.host}:{args.port}")
                    continue

                print(client.send_command(command))

            except EOFError:
                print("\nGoodbye!")
                break

    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
    finally:
        client.disconnect()


if __name__ == "__main__":
    main()
