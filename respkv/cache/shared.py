"""
Shared store handle.

One SharedStore is created per server and handed to every connection.
A single asyncio.Lock guards the whole map and is held for exactly one
KVStore call, never across network I/O.
"""

import asyncio
from typing import Any, Dict, Optional

from .store import KVStore


class SharedStore:
    """Lock-guarded wrapper around a KVStore shared by all connections."""

    def __init__(self, store: KVStore = None):
        self.store = store if store is not None else KVStore()
        self._lock = asyncio.Lock()

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self.store.set(key, value)

    async def set_with_expiry(self, key: str, value: str, ttl_ms: int) -> None:
        async with self._lock:
            self.store.set_with_expiry(key, value, ttl_ms)

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self.store.get(key)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self.store.delete(key)

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return self.store.exists(key)

    async def size(self) -> int:
        async with self._lock:
            return self.store.size()

    async def cleanup_expired(self) -> int:
        async with self._lock:
            return self.store.cleanup_expired()

    async def get_stats(self) -> Dict[str, Any]:
        async with self._lock:
            return self.store.get_stats()
