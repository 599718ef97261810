"""Cache module for RESP-KV."""

from .shared import SharedStore
from .store import KVStore, StoreEntry

__all__ = ["KVStore", "SharedStore", "StoreEntry"]
