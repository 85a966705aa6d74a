"""Record schemas for Soko Link."""

from sokolink.models.schemas import (
    BaseEntity,
    Business,
    BusinessCategory,
    BusinessDraft,
    BusinessProfile,
    CommunityItem,
    CommunityItemCategory,
    CommunityItemDraft,
    Conversation,
    ItemCondition,
    ItemStatus,
    Message,
    Product,
    Role,
    SocialMedia,
)

__all__ = [
    "BaseEntity",
    "Business",
    "BusinessCategory",
    "BusinessDraft",
    "BusinessProfile",
    "CommunityItem",
    "CommunityItemCategory",
    "CommunityItemDraft",
    "Conversation",
    "ItemCondition",
    "ItemStatus",
    "Message",
    "Product",
    "Role",
    "SocialMedia",
]
