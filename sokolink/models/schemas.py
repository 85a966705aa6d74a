"""Pydantic models for Soko Link core entities.

Drafts are the shapes the AI gateway and the seller form produce (no id, no
status). Records are drafts plus the derived id and, for community items, the
listing status.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sokolink.core.identity import (
    SELLER_PROFILE_ID,
    ai_item_id,
    business_id,
    user_item_id,
)


class Role(str, Enum):
    """Which side of the marketplace the user is acting on."""
    BUYER = "Buyer"
    SELLER = "Seller"


class BusinessCategory(str, Enum):
    """Local business categories."""
    CAFE = "cafe"
    RESTAURANT = "restaurant"
    SHOP = "shop"
    SALON = "salon"
    SERVICES = "services"
    OTHER = "other"


class CommunityItemCategory(str, Enum):
    """Soko Mtaani item categories."""
    ELECTRONICS = "Electronics"
    FURNITURE = "Furniture"
    CLOTHING = "Clothing"
    APPLIANCES = "Appliances"
    BOOKS = "Books"
    TOYS = "Toys"
    OTHER = "Other"


class ItemCondition(str, Enum):
    """Condition of a second-hand item."""
    NEW = "New"
    USED_LIKE_NEW = "Used - Like New"
    USED_GOOD = "Used - Good"
    FOR_PARTS = "For Parts"


class ItemStatus(str, Enum):
    """Listing status. Items move from available to sold."""
    AVAILABLE = "available"
    SOLD = "sold"


# =============================================================================
# Base Model
# =============================================================================


class BaseEntity(BaseModel):
    """Base model accepting both snake_case and camelCase keys.

    Gateway responses and older stored values may use camelCase; everything
    is dumped with the Python field names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Businesses
# =============================================================================


class Product(BaseEntity):
    """A product on a business's catalogue."""

    name: str = Field(..., min_length=1, description="Product name")
    price: str = Field("", description="Display price, e.g. 'KES 250'")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        if isinstance(v, (int, float)):
            return str(v)
        return v


class SocialMedia(BaseEntity):
    """Optional social links and handles."""

    instagram: Optional[str] = None
    facebook: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    whatsapp: Optional[str] = None


class BusinessDraft(BaseEntity):
    """Business as returned by the gateway, before an id is assigned."""

    name: str = Field(..., min_length=1, description="Business name")
    address: str = Field(..., description="Full physical address")
    phone: str = Field("", description="Primary contact phone number")
    hours: str = Field("", description="Opening hours, e.g. 'Mon-Fri 9am-6pm'")
    delivery: bool = Field(False, description="Offers delivery")
    price_range: str = Field("", description="$, $$, $$$ or $$$$")
    negotiable: bool = Field(False, description="Prices are negotiable")
    category: BusinessCategory = Field(BusinessCategory.OTHER, description="Business type")
    products: list[Product] = Field(default_factory=list)
    social_media: SocialMedia = Field(default_factory=SocialMedia)

    @field_validator("category", mode="before")
    @classmethod
    def lowercase_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("phone", "hours", "price_range", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Business(BusinessDraft):
    """Business record addressed by its derived id."""

    id: str = Field(..., description="Derived from name and address")

    @classmethod
    def from_draft(cls, draft: BusinessDraft) -> "Business":
        """Assign the derived id to a gateway draft."""
        return cls(id=business_id(draft.name, draft.address), **draft.model_dump())


# =============================================================================
# Community Items
# =============================================================================


class CommunityItemDraft(BaseEntity):
    """Second-hand item before an id and status are assigned."""

    title: str = Field(..., min_length=1, description="Listing title")
    description: str = Field("", description="Short description of the item")
    price: str = Field(..., description="Display price, e.g. 'KES 15,000'")
    condition: ItemCondition = Field(ItemCondition.USED_GOOD)
    category: CommunityItemCategory = Field(CommunityItemCategory.OTHER)
    image_url: Optional[str] = Field(None, description="Image URL or data URI")
    location: str = Field("", description="Neighbourhood where the item is")
    seller_name: str = Field("", description="Seller display name")
    negotiable: bool = Field(False, description="Price is negotiable")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        if isinstance(v, (int, float)):
            return str(v)
        return v


class CommunityItem(CommunityItemDraft):
    """Community listing addressed by its namespaced id."""

    id: str = Field(..., description="ai-item-* or user-item-*")
    status: ItemStatus = Field(ItemStatus.AVAILABLE)

    @classmethod
    def from_ai_draft(cls, draft: CommunityItemDraft) -> "CommunityItem":
        """Gateway items are keyed by title, location and seller."""
        return cls(
            id=ai_item_id(draft.title, draft.location, draft.seller_name),
            status=ItemStatus.AVAILABLE,
            **draft.model_dump(),
        )

    @classmethod
    def from_user_draft(cls, draft: CommunityItemDraft) -> "CommunityItem":
        """Seller listings are keyed by title, category and price."""
        return cls(
            id=user_item_id(draft.title, draft.category.value, draft.price),
            status=ItemStatus.AVAILABLE,
            **draft.model_dump(),
        )


# =============================================================================
# Conversations
# =============================================================================


class Message(BaseEntity):
    """A single message in a conversation."""

    sender: Role
    text: str
    timestamp: datetime


class Conversation(BaseEntity):
    """Message thread about one item. The conversation id is the item id."""

    id: str
    item_id: str
    item_name: str
    messages: list[Message] = Field(default_factory=list)
    is_read_by_buyer: bool = True
    is_read_by_seller: bool = False

    def is_read_by(self, role: Role) -> bool:
        if role == Role.BUYER:
            return self.is_read_by_buyer
        return self.is_read_by_seller


# =============================================================================
# Business Profile
# =============================================================================


class BusinessProfile(BaseEntity):
    """The current user's own business listing."""

    business_name: str = ""
    address: str = ""
    category: BusinessCategory = BusinessCategory.SHOP
    website: str = ""
    instagram: str = ""
    facebook: str = ""
    twitter: str = ""
    whatsapp: str = ""
    products: list[Product] = Field(default_factory=list)
    phone: str = ""
    hours: str = "Mon-Fri 9am-5pm"
    delivery: bool = False
    price_range: str = "$$"
    negotiable: bool = False

    @property
    def is_listable(self) -> bool:
        """A profile appears in search results once it has a name and address."""
        return bool(self.business_name and self.address)

    def to_business(self) -> Business:
        """Build the synthetic business record injected into search results."""
        return Business(
            id=SELLER_PROFILE_ID,
            name=self.business_name,
            address=self.address,
            category=self.category,
            products=list(self.products),
            phone=self.phone or self.whatsapp or "Not specified",
            hours=self.hours,
            delivery=self.delivery,
            price_range=self.price_range,
            negotiable=self.negotiable,
            social_media=SocialMedia(
                website=self.website,
                instagram=self.instagram,
                facebook=self.facebook,
                twitter=self.twitter,
                whatsapp=self.whatsapp,
            ),
        )
