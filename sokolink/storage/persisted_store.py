"""Persisted store mirroring named state slots to a key-value backend.

Loading never raises: a missing, unreadable, unparsable or schema-invalid value
falls back to the slot default. Saving never raises either: a failed write is
logged and the in-memory state stays authoritative for the session.

Usage:
    store = PersistedStore(JsonFileBackend(Path(".soko-link")))
    conversations = store.load_slot(CONVERSATIONS)
    store.save_slot(CONVERSATIONS, conversations)
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from sokolink.core.exceptions import StorageReadError, StorageWriteError
from sokolink.models.schemas import (
    Business,
    BusinessProfile,
    CommunityItem,
    Conversation,
    Role,
)
from sokolink.storage.backends import StorageBackend

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StateSlot(Generic[T]):
    """A named piece of application state and its declared type and default."""

    key: str
    annotation: Any
    default_factory: Callable[[], T]


# =============================================================================
# State Slots
# =============================================================================

ROLE: StateSlot[Role] = StateSlot("role", Role, lambda: Role.BUYER)
BUSINESSES: StateSlot[list[Business]] = StateSlot("businesses", list[Business], list)
AI_ITEMS: StateSlot[list[CommunityItem]] = StateSlot("ai-items", list[CommunityItem], list)
USER_ITEMS: StateSlot[list[CommunityItem]] = StateSlot("user-items", list[CommunityItem], list)
CONVERSATIONS: StateSlot[list[Conversation]] = StateSlot(
    "conversations", list[Conversation], list
)
SELLER_PROFILE: StateSlot[BusinessProfile] = StateSlot(
    "seller-profile", BusinessProfile, BusinessProfile
)
FAVORITE_BUSINESSES: StateSlot[list[Business]] = StateSlot("fav-biz", list[Business], list)
FAVORITE_ITEMS: StateSlot[list[CommunityItem]] = StateSlot(
    "fav-items", list[CommunityItem], list
)
HAS_SEARCHED: StateSlot[bool] = StateSlot("has-searched", bool, lambda: False)

ALL_SLOTS = (
    ROLE,
    BUSINESSES,
    AI_ITEMS,
    USER_ITEMS,
    CONVERSATIONS,
    SELLER_PROFILE,
    FAVORITE_BUSINESSES,
    FAVORITE_ITEMS,
    HAS_SEARCHED,
)


class PersistedStore:
    """
    Best-effort JSON persistence for state slots.

    Args:
        backend: Key-value medium
        key_prefix: Prefix for every key (default: "soko-link-")
    """

    def __init__(self, backend: StorageBackend, key_prefix: str = "soko-link-"):
        self.backend = backend
        self.key_prefix = key_prefix
        self._adapters: dict[str, TypeAdapter] = {}

    def _adapter(self, annotation: Any) -> TypeAdapter:
        key = repr(annotation)
        if key not in self._adapters:
            self._adapters[key] = TypeAdapter(annotation)
        return self._adapters[key]

    def full_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def load(self, key: str, default: T, annotation: Any = Any) -> T:
        """Read and validate a value, returning default when absent or broken."""
        full_key = self.full_key(key)
        try:
            raw = self.backend.get(full_key)
        except StorageReadError as e:
            logger.error("state_read_failed", key=full_key, error=str(e))
            return default

        if raw is None:
            return default

        try:
            return self._adapter(annotation).validate_json(raw)
        except ValidationError as e:
            logger.error(
                "state_load_failed",
                key=full_key,
                error_count=e.error_count(),
                error=str(e),
            )
            return default

    def save(self, key: str, value: Any, annotation: Any = Any) -> bool:
        """Serialize and write a value. Returns False if the write failed."""
        full_key = self.full_key(key)
        try:
            raw = self._adapter(annotation).dump_json(value).decode("utf-8")
            self.backend.set(full_key, raw)
        except (StorageWriteError, ValueError) as e:
            logger.error("state_save_failed", key=full_key, error=str(e))
            return False

        logger.debug("state_saved", key=full_key, size=len(raw))
        return True

    def load_slot(self, slot: StateSlot[T]) -> T:
        return self.load(slot.key, slot.default_factory(), slot.annotation)

    def save_slot(self, slot: StateSlot[T], value: T) -> bool:
        return self.save(slot.key, value, slot.annotation)

    def clear(self) -> None:
        """Remove every known slot from the backend."""
        for slot in ALL_SLOTS:
            try:
                self.backend.delete(self.full_key(slot.key))
            except StorageWriteError as e:
                logger.error("state_clear_failed", key=slot.key, error=str(e))
