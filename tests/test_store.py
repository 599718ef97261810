"""
Tests for the Key-Value Store

These tests verify the basic KVStore operations:
- set(): Insert or overwrite key-value pairs
- get(): Retrieve values by key
- delete(): Remove key-value pairs
- exists(): Check if key exists
- SharedStore: the same operations behind the shared lock

Run with: python -m pytest tests/test_store.py -v
"""

import asyncio

import pytest

from respkv.cache.shared import SharedStore
from respkv.cache.store import KVStore


class TestKVStoreSet:
    """Test set() method."""

    def test_set_new_key(self, store: KVStore):
        store.set("key1", "value1")
        assert store.get("key1") == "value1"
        assert store.size() == 1

    def test_set_overwrites_existing_key(self, store: KVStore):
        store.set("key1", "value1")
        store.set("key1", "value2")

        assert store.get("key1") == "value2"
        assert store.size() == 1  # Size should not increase

    def test_set_multiple_keys(self, store: KVStore):
        for i in range(10):
            store.set(f"key{i}", f"value{i}")

        assert store.size() == 10
        for i in range(10):
            assert store.get(f"key{i}") == f"value{i}"

    def test_keys_are_case_sensitive(self, store: KVStore):
        store.set("Key", "upper")
        store.set("key", "lower")

        assert store.get("Key") == "upper"
        assert store.get("key") == "lower"

    def test_empty_and_special_values(self, store: KVStore):
        store.set("empty", "")
        store.set("spaces", "a b c")
        store.set("minus", "-1")

        assert store.get("empty") == ""
        assert store.get("spaces") == "a b c"
        assert store.get("minus") == "-1"

    def test_set_clears_previous_expiry(self, store: KVStore, clock):
        store.set_with_expiry("key", "v1", 100)
        store.set("key", "v2")

        clock.advance(10)

        assert store.get("key") == "v2"


class TestKVStoreGet:
    """Test get() method."""

    def test_get_missing_key(self, store: KVStore):
        assert store.get("missing") is None

    def test_get_does_not_modify(self, store: KVStore):
        store.set("key", "value")
        store.get("key")
        store.get("key")
        assert store.size() == 1


class TestKVStoreDelete:
    """Test delete() method."""

    def test_delete_existing_key(self, store: KVStore):
        store.set("key", "value")

        assert store.delete("key") is True
        assert store.get("key") is None
        assert store.size() == 0

    def test_delete_missing_key(self, store: KVStore):
        assert store.delete("missing") is False

    def test_delete_twice(self, store: KVStore):
        store.set("key", "value")
        assert store.delete("key") is True
        assert store.delete("key") is False


class TestKVStoreExists:
    """Test exists() method."""

    def test_exists_true(self, store: KVStore):
        store.set("key", "value")
        assert store.exists("key") is True

    def test_exists_false(self, store: KVStore):
        assert store.exists("key") is False

    def test_exists_with_empty_value(self, store: KVStore):
        store.set("key", "")
        assert store.exists("key") is True


class TestKVStoreMisc:
    """Test clear(), size() and stats."""

    def test_clear(self, store: KVStore):
        store.set("a", "1")
        store.set("b", "2")
        store.clear()
        assert store.size() == 0

    def test_stats(self, store: KVStore):
        store.set("a", "1")
        store.set_with_expiry("b", "2", 60_000)

        stats = store.get_stats()

        assert stats["total_keys"] == 2
        assert stats["active_keys"] == 2
        assert stats["expired_keys"] == 0
        assert stats["volatile_keys"] == 1

    def test_default_clock(self):
        """Without an injected clock the store uses real time."""
        store = KVStore()
        store.set_with_expiry("key", "value", 60_000)
        assert store.get("key") == "value"


@pytest.mark.asyncio
class TestSharedStore:
    """Test the lock-guarded shared handle."""

    async def test_set_and_get(self, shared_store: SharedStore):
        await shared_store.set("key", "value")
        assert await shared_store.get("key") == "value"

    async def test_set_with_expiry(self, shared_store: SharedStore, clock):
        await shared_store.set_with_expiry("key", "value", 500)
        assert await shared_store.get("key") == "value"

        clock.advance(0.6)

        assert await shared_store.get("key") is None
        assert await shared_store.size() == 0

    async def test_delete_and_exists(self, shared_store: SharedStore):
        await shared_store.set("key", "value")
        assert await shared_store.exists("key") is True
        assert await shared_store.delete("key") is True
        assert await shared_store.exists("key") is False

    async def test_concurrent_writers(self, shared_store: SharedStore):
        """Many tasks writing through the shared handle lose no keys."""
        async def writer(n: int) -> None:
            for i in range(50):
                await shared_store.set(f"w{n}:k{i}", str(i))

        await asyncio.gather(*(writer(n) for n in range(10)))

        assert await shared_store.size() == 500
        assert await shared_store.get("w7:k49") == "49"

    async def test_default_store_created(self):
        shared = SharedStore()
        await shared.set("key", "value")
        assert shared.store.get("key") == "value"
