"""
Persisted store and key-value backends.

- backends: in-memory, JSON file and Redis media
- persisted_store: slot declarations and best-effort load/save
"""

from sokolink.storage.backends import (
    InMemoryBackend,
    JsonFileBackend,
    RedisBackend,
    StorageBackend,
    get_storage_backend,
)
from sokolink.storage.persisted_store import (
    AI_ITEMS,
    ALL_SLOTS,
    BUSINESSES,
    CONVERSATIONS,
    FAVORITE_BUSINESSES,
    FAVORITE_ITEMS,
    HAS_SEARCHED,
    ROLE,
    SELLER_PROFILE,
    USER_ITEMS,
    PersistedStore,
    StateSlot,
)

__all__ = [
    "InMemoryBackend",
    "JsonFileBackend",
    "RedisBackend",
    "StorageBackend",
    "get_storage_backend",
    "AI_ITEMS",
    "ALL_SLOTS",
    "BUSINESSES",
    "CONVERSATIONS",
    "FAVORITE_BUSINESSES",
    "FAVORITE_ITEMS",
    "HAS_SEARCHED",
    "ROLE",
    "SELLER_PROFILE",
    "USER_ITEMS",
    "PersistedStore",
    "StateSlot",
]
