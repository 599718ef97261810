"""
RESP-KV: In-Memory Key-Value Server

A minimal single-node key-value server speaking a subset of the
RESP protocol, built with Python asyncio over raw TCP sockets.
"""

__version__ = "1.0.0"
