"""Catalog views over community items and the seller listing form.

Pure functions; the marketplace controller owns the collections.
"""

from typing import Iterable, Optional

from sokolink.models.schemas import (
    BusinessProfile,
    CommunityItem,
    CommunityItemCategory,
    CommunityItemDraft,
    ItemCondition,
    ItemStatus,
)

DEFAULT_SELLER_LOCATION = "Seller Location"
SELF_SELLER_NAME = "You"


def available_items(items: Iterable[CommunityItem]) -> list[CommunityItem]:
    """Items still for sale."""
    return [item for item in items if item.status == ItemStatus.AVAILABLE]


def item_categories(items: Iterable[CommunityItem]) -> list[CommunityItemCategory]:
    """Distinct categories in first-seen order."""
    seen: dict[CommunityItemCategory, None] = {}
    for item in items:
        seen.setdefault(item.category, None)
    return list(seen)


def filter_items(
    items: Iterable[CommunityItem],
    query: str = "",
    category: Optional[str] = None,
) -> list[CommunityItem]:
    """
    Filter items by free-text query and category.

    The query matches title or description, case-insensitively. Empty
    filters match everything.
    """
    needle = query.strip().lower()
    wanted = category.lower() if category else None

    results = []
    for item in items:
        if wanted and item.category.value.lower() != wanted:
            continue
        if needle and needle not in item.title.lower() and needle not in item.description.lower():
            continue
        results.append(item)
    return results


def active_listing_count(items: Iterable[CommunityItem]) -> int:
    """Number of a seller's listings still available."""
    return len(available_items(items))


def format_listing_price(amount: int) -> str:
    """Format a whole-shilling amount, e.g. 15000 -> 'Ksh 15,000'."""
    return f"Ksh {amount:,}"


def build_listing(
    profile: BusinessProfile,
    title: str,
    description: str,
    price: int,
    condition: ItemCondition = ItemCondition.USED_GOOD,
    category: CommunityItemCategory = CommunityItemCategory.OTHER,
    image_url: Optional[str] = None,
    negotiable: bool = True,
) -> CommunityItemDraft:
    """
    Turn the seller form into a listing draft.

    Raises:
        ValueError: If title or description is blank or price is not positive.
    """
    if not title.strip():
        raise ValueError("A listing needs a title")
    if not description.strip():
        raise ValueError("A listing needs a description")
    if price <= 0:
        raise ValueError("A listing needs a positive price")

    return CommunityItemDraft(
        title=title.strip(),
        description=description.strip(),
        price=format_listing_price(price),
        condition=condition,
        category=category,
        image_url=image_url,
        location=profile.address or DEFAULT_SELLER_LOCATION,
        seller_name=SELF_SELLER_NAME,
        negotiable=negotiable,
    )
