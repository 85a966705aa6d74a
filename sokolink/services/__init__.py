"""
Marketplace services.

- marketplace: the state controller (search, listings, conversations, favorites, profile)
- catalog: filtering and listing-form helpers
"""

from sokolink.services.catalog import (
    active_listing_count,
    available_items,
    build_listing,
    filter_items,
    format_listing_price,
    item_categories,
)
from sokolink.services.marketplace import (
    Marketplace,
    MarketplaceState,
    build_marketplace,
)

__all__ = [
    "active_listing_count",
    "available_items",
    "build_listing",
    "filter_items",
    "format_listing_price",
    "item_categories",
    "Marketplace",
    "MarketplaceState",
    "build_marketplace",
]
