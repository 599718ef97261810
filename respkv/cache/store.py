"""
Key-Value Store Module

This module implements the core key-value storage with lazy expiry.

KVStore is not thread- or task-safe on its own; every call is expected to be
serialized by its owner (see SharedStore).
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class StoreEntry:
    """
    A stored value.

    Attributes:
        value: The stored string
        expires_at: Absolute expiry on the store clock (None = never)
    """
    value: str
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class KVStore:
    """
    In-memory key-value store with TTL support.

    This class provides O(1) average-case time complexity for:
    - set / set_with_expiry: Insert or overwrite a key
    - get: Retrieve a value, purging it first if it has expired
    - delete: Remove a key

    Expiry is lazy: an expired entry stays in memory until it is read,
    deleted, or removed by cleanup_expired().

    Internal Storage:
        dict of key -> StoreEntry
        expires_at is measured on ``clock`` (time.monotonic by default)
    """

    def __init__(self, clock: Callable[[], float] = None):
        """
        Initialize the KV store.

        Args:
            clock: Zero-argument callable returning seconds (default time.monotonic)
        """
        self._clock = clock if clock is not None else time.monotonic
        self._store: Dict[str, StoreEntry] = {}

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite a key with no expiry."""
        self._store[key] = StoreEntry(value=value)

    def set_with_expiry(self, key: str, value: str, ttl_ms: int) -> None:
        """
        Insert or overwrite a key that expires after ttl_ms milliseconds.

        Args:
            key: The key to store
            value: The value to associate with the key
            ttl_ms: Time-to-live in milliseconds; 0 expires immediately

        Raises:
            ValueError: If ttl_ms is negative
        """
        if ttl_ms < 0:
            raise ValueError("ttl_ms must be non-negative")
        expires_at = self._clock() + ttl_ms / 1000.0
        self._store[key] = StoreEntry(value=value, expires_at=expires_at)

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value for a given key.

        Returns:
            The value if found and not expired, None otherwise.
            An expired entry is removed as a side effect.
        """
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            # Lazy expiration
            del self._store[key]
            return None

        return entry.value

    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if a live key was deleted, False if it was absent or expired
        """
        entry = self._store.pop(key, None)
        if entry is None:
            return False
        return not entry.is_expired(self._clock())

    def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired (purges expired keys)."""
        return self.get(key) is not None

    def size(self) -> int:
        """
        Get the current number of keys in the store.

        Note: This may include expired keys that haven't been read yet.
        """
        return len(self._store)

    def clear(self) -> None:
        """Remove all keys from the store."""
        self._store.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired keys from the store (active expiration).

        Returns:
            Number of keys removed
        """
        now = self._clock()
        to_delete = [k for k, entry in self._store.items() if entry.is_expired(now)]
        for key in to_delete:
            del self._store[key]
        return len(to_delete)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing total_keys, expired_keys (not yet purged),
            active_keys and volatile_keys (keys with an expiry set).
        """
        now = self._clock()
        total = len(self._store)
        expired = sum(1 for entry in self._store.values() if entry.is_expired(now))
        volatile = sum(1 for entry in self._store.values() if entry.expires_at is not None)

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
            "volatile_keys": volatile,
        }
