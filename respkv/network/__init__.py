"""Network module for RESP-KV."""

from .tcp_server import KVServer

__all__ = ["KVServer"]
