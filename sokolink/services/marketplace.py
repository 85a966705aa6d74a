"""
Marketplace controller.

Owns every piece of application state (businesses, AI and user-listed items,
conversations, favorites, the seller profile, role and has-searched flag) and
exposes the operations that mutate it. Each mutation is written through the
injected PersistedStore straight away; a store is optional so the controller
can run purely in memory.

Usage:
    marketplace = build_marketplace()
    ok = await marketplace.search("Vibanda vya mboga", "Buru Buru")
    if not ok:
        print(marketplace.error)
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from sokolink.config.settings import Settings, get_settings
from sokolink.core.exceptions import GatewayError
from sokolink.core.identity import SELLER_PROFILE_ID, business_id
from sokolink.gateway.base import MarketplaceGateway
from sokolink.models.schemas import (
    Business,
    BusinessProfile,
    CommunityItem,
    CommunityItemDraft,
    Conversation,
    ItemStatus,
    Message,
    Product,
    Role,
)
from sokolink.storage import persisted_store as slots
from sokolink.storage.persisted_store import PersistedStore, StateSlot

logger = structlog.get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred. Please try again."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MarketplaceState:
    """In-memory collections, one field per persisted slot."""

    role: Role = Role.BUYER
    businesses: list[Business] = field(default_factory=list)
    ai_items: list[CommunityItem] = field(default_factory=list)
    user_items: list[CommunityItem] = field(default_factory=list)
    conversations: list[Conversation] = field(default_factory=list)
    profile: BusinessProfile = field(default_factory=BusinessProfile)
    favorite_businesses: list[Business] = field(default_factory=list)
    favorite_items: list[CommunityItem] = field(default_factory=list)
    has_searched: bool = False

    @classmethod
    def load(cls, store: PersistedStore) -> "MarketplaceState":
        """Rehydrate every slot, falling back to defaults slot by slot."""
        return cls(
            role=store.load_slot(slots.ROLE),
            businesses=store.load_slot(slots.BUSINESSES),
            ai_items=store.load_slot(slots.AI_ITEMS),
            user_items=store.load_slot(slots.USER_ITEMS),
            conversations=store.load_slot(slots.CONVERSATIONS),
            profile=store.load_slot(slots.SELLER_PROFILE),
            favorite_businesses=store.load_slot(slots.FAVORITE_BUSINESSES),
            favorite_items=store.load_slot(slots.FAVORITE_ITEMS),
            has_searched=store.load_slot(slots.HAS_SEARCHED),
        )


class Marketplace:
    """
    Application state controller.

    Search and browse are coroutines because they await the gateway; every
    other operation is synchronous. Operations addressing a missing record are
    silent no-ops.

    Args:
        gateway: AI gateway used for discovery and suggestions
        store: Persisted store; None keeps state in memory only
        default_location: Location used by browse_community()
        clock: Timestamp source for messages
    """

    def __init__(
        self,
        gateway: MarketplaceGateway,
        store: Optional[PersistedStore] = None,
        default_location: str = "Kenya",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.gateway = gateway
        self._store = store
        self.default_location = default_location
        self._clock = clock
        self.state = MarketplaceState.load(store) if store else MarketplaceState()
        self.is_loading = False
        self.error: Optional[str] = None

    def _persist(self, slot: StateSlot, value) -> None:
        if self._store is not None:
            self._store.save_slot(slot, value)

    # -------------------------------------------------------------------------
    # Role
    # -------------------------------------------------------------------------

    @property
    def role(self) -> Role:
        return self.state.role

    def set_role(self, role: Role) -> None:
        self.state.role = role
        self._persist(slots.ROLE, role)

    # -------------------------------------------------------------------------
    # Search / Browse
    # -------------------------------------------------------------------------

    def _with_profile(self, businesses: list[Business]) -> list[Business]:
        """
        Merge the seller's own business into results.

        An entry carrying the profile id, or the id derived from the profile's
        name and address, is replaced in place; otherwise the profile goes first.
        """
        profile = self.state.profile
        if not profile.is_listable:
            return businesses

        own = profile.to_business()
        own_ids = {SELLER_PROFILE_ID, business_id(profile.business_name, profile.address)}

        merged: list[Business] = []
        replaced = False
        for business in businesses:
            if business.id in own_ids:
                if not replaced:
                    merged.append(own)
                    replaced = True
                continue
            merged.append(business)

        if not replaced:
            merged.insert(0, own)
        return merged

    async def search(self, query: str, location: str) -> bool:
        """
        Search businesses and community items together.

        Both gateway calls must succeed. On failure the previous results are
        kept and self.error holds a single user-facing message.

        Returns:
            True if results were replaced, False on failure.
        """
        self.is_loading = True
        self.error = None
        self.state.has_searched = True
        self._persist(slots.HAS_SEARCHED, True)
        log = logger.bind(query=query, location=location)

        try:
            business_drafts, item_drafts = await asyncio.gather(
                self.gateway.find_businesses(query, location),
                self.gateway.find_community_items(location),
            )
        except GatewayError as e:
            log.error("search_failed", error=e.message)
            self.error = e.user_message
            return False
        except Exception as e:
            log.error("search_failed", error=str(e), error_type=type(e).__name__)
            self.error = UNKNOWN_ERROR_MESSAGE
            return False
        finally:
            self.is_loading = False

        businesses = self._with_profile([Business.from_draft(d) for d in business_drafts])
        ai_items = [CommunityItem.from_ai_draft(d) for d in item_drafts]

        self.state.businesses = businesses
        self.state.ai_items = ai_items
        self._persist(slots.BUSINESSES, businesses)
        self._persist(slots.AI_ITEMS, ai_items)

        log.info("search_completed", businesses=len(businesses), items=len(ai_items))
        return True

    async def browse_community(self, location: Optional[str] = None) -> bool:
        """Fetch Soko Mtaani items for a location without a business search."""
        location = location or self.default_location
        self.is_loading = True
        self.error = None

        try:
            item_drafts = await self.gateway.find_community_items(location)
        except GatewayError as e:
            logger.error("browse_failed", location=location, error=e.message)
            self.error = e.user_message
            return False
        except Exception as e:
            logger.error(
                "browse_failed",
                location=location,
                error=str(e),
                error_type=type(e).__name__,
            )
            self.error = UNKNOWN_ERROR_MESSAGE
            return False
        finally:
            self.is_loading = False

        self.state.ai_items = [CommunityItem.from_ai_draft(d) for d in item_drafts]
        self._persist(slots.AI_ITEMS, self.state.ai_items)
        logger.info("browse_completed", location=location, items=len(self.state.ai_items))
        return True

    async def start_community(self) -> bool:
        """Enter Soko Mtaani as a buyer, fetching items only if there are none yet."""
        self.set_role(Role.BUYER)
        if self.state.ai_items or self.state.user_items:
            return True
        return await self.browse_community()

    def community_feed(self) -> list[CommunityItem]:
        """User-listed items first, then AI items."""
        return [*self.state.user_items, *self.state.ai_items]

    # -------------------------------------------------------------------------
    # User Listings
    # -------------------------------------------------------------------------

    def add_item(self, draft: CommunityItemDraft) -> Optional[CommunityItem]:
        """
        List a new item.

        Returns:
            The new item, or None if an item with the same id already exists.
        """
        item = CommunityItem.from_user_draft(draft)
        if any(existing.id == item.id for existing in self.state.user_items):
            logger.warning("duplicate_item_rejected", item_id=item.id)
            return None

        self.state.user_items = [item, *self.state.user_items]
        self._persist(slots.USER_ITEMS, self.state.user_items)
        logger.info("item_listed", item_id=item.id)
        return item

    def delete_item(self, item_id: str) -> bool:
        """Remove a listing and any favorite pointing at it."""
        before = len(self.state.user_items)
        self.state.user_items = [i for i in self.state.user_items if i.id != item_id]
        self.state.favorite_items = [i for i in self.state.favorite_items if i.id != item_id]
        self._persist(slots.USER_ITEMS, self.state.user_items)
        self._persist(slots.FAVORITE_ITEMS, self.state.favorite_items)
        return len(self.state.user_items) < before

    def update_item_status(self, item_id: str, status: ItemStatus) -> bool:
        for item in self.state.user_items:
            if item.id == item_id:
                item.status = status
                self._persist(slots.USER_ITEMS, self.state.user_items)
                return True
        return False

    # -------------------------------------------------------------------------
    # Conversations
    # -------------------------------------------------------------------------

    def _find_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return next((c for c in self.state.conversations if c.id == conversation_id), None)

    def send_message(self, item_id: str, item_name: str, text: str) -> Conversation:
        """Buyer message about an item; opens the conversation on first contact."""
        message = Message(sender=Role.BUYER, text=text, timestamp=self._clock())
        conversation = next(
            (c for c in self.state.conversations if c.item_id == item_id), None
        )

        if conversation is not None:
            conversation.messages.append(message)
            conversation.is_read_by_seller = False
        else:
            conversation = Conversation(
                id=item_id,
                item_id=item_id,
                item_name=item_name,
                messages=[message],
                is_read_by_buyer=True,
                is_read_by_seller=False,
            )
            self.state.conversations = [conversation, *self.state.conversations]

        self._persist(slots.CONVERSATIONS, self.state.conversations)
        return conversation

    def reply(self, conversation_id: str, text: str) -> bool:
        """Seller reply; the buyer now has something unread."""
        conversation = self._find_conversation(conversation_id)
        if conversation is None:
            return False

        conversation.messages.append(
            Message(sender=Role.SELLER, text=text, timestamp=self._clock())
        )
        conversation.is_read_by_buyer = False
        conversation.is_read_by_seller = True
        self._persist(slots.CONVERSATIONS, self.state.conversations)
        return True

    def mark_read(self, conversation_id: str, role: Optional[Role] = None) -> bool:
        """Mark a conversation read for one role (the current role by default)."""
        conversation = self._find_conversation(conversation_id)
        if conversation is None:
            return False

        if (role or self.state.role) == Role.BUYER:
            conversation.is_read_by_buyer = True
        else:
            conversation.is_read_by_seller = True
        self._persist(slots.CONVERSATIONS, self.state.conversations)
        return True

    def unread_count(self, role: Optional[Role] = None) -> int:
        role = role or self.state.role
        return sum(1 for c in self.state.conversations if not c.is_read_by(role))

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    def toggle_favorite_business(self, business: Business) -> bool:
        """Returns True if the business is a favorite after the toggle."""
        if self.is_favorite_business(business.id):
            self.state.favorite_businesses = [
                b for b in self.state.favorite_businesses if b.id != business.id
            ]
            favorited = False
        else:
            self.state.favorite_businesses = [*self.state.favorite_businesses, business]
            favorited = True
        self._persist(slots.FAVORITE_BUSINESSES, self.state.favorite_businesses)
        return favorited

    def toggle_favorite_item(self, item: CommunityItem) -> bool:
        """Returns True if the item is a favorite after the toggle."""
        if self.is_favorite_item(item.id):
            self.state.favorite_items = [i for i in self.state.favorite_items if i.id != item.id]
            favorited = False
        else:
            self.state.favorite_items = [*self.state.favorite_items, item]
            favorited = True
        self._persist(slots.FAVORITE_ITEMS, self.state.favorite_items)
        return favorited

    def is_favorite_business(self, business_id_: str) -> bool:
        return any(b.id == business_id_ for b in self.state.favorite_businesses)

    def is_favorite_item(self, item_id: str) -> bool:
        return any(i.id == item_id for i in self.state.favorite_items)

    # -------------------------------------------------------------------------
    # Business Profile
    # -------------------------------------------------------------------------

    def save_profile(self, profile: BusinessProfile) -> None:
        self.state.profile = profile.model_copy(deep=True)
        self._persist(slots.SELLER_PROFILE, self.state.profile)

    def add_product(self, product: Product) -> None:
        """Append a product. Names are not deduplicated."""
        self.state.profile.products.append(product)
        self._persist(slots.SELLER_PROFILE, self.state.profile)

    def delete_product(self, name: str) -> int:
        """Remove every product with this name. Returns how many were removed."""
        products = self.state.profile.products
        kept = [p for p in products if p.name != name]
        self.state.profile.products = kept
        self._persist(slots.SELLER_PROFILE, self.state.profile)
        return len(products) - len(kept)

    # -------------------------------------------------------------------------
    # Assistance
    # -------------------------------------------------------------------------

    async def negotiation_tip(self, item_name: str, user_message: str) -> str:
        return await self.gateway.get_negotiation_tip(item_name, user_message)

    async def suggest_price(self, item_name: str, item_description: str = "") -> str:
        return await self.gateway.suggest_price(item_name, item_description)

    async def describe_item(self, item_name: str) -> str:
        return await self.gateway.generate_description(item_name)


def build_marketplace(settings: Optional[Settings] = None) -> Marketplace:
    """Wire a Marketplace from settings: storage backend, store and Claude gateway."""
    from sokolink.gateway.anthropic_gateway import AnthropicGateway
    from sokolink.storage.backends import get_storage_backend

    settings = settings or get_settings()
    store = PersistedStore(
        get_storage_backend(settings),
        key_prefix=settings.storage_key_prefix,
    )
    return Marketplace(
        gateway=AnthropicGateway(settings),
        store=store,
        default_location=settings.default_community_location,
    )
