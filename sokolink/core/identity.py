"""Deterministic record identifiers.

Records coming from the AI gateway or the seller form have no server-assigned
key, so ids are derived from their salient fields. The same fields always give
the same id, across renders and across sessions.
"""

import re

SELLER_PROFILE_ID = "seller-biz-profile"
AI_ITEM_PREFIX = "ai-item-"
USER_ITEM_PREFIX = "user-item-"

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def normalize(*parts: str) -> str:
    """Concatenate parts, drop everything but ASCII letters and digits, lowercase."""
    return _NON_ALPHANUMERIC.sub("", "".join(parts)).lower()


def business_id(name: str, address: str) -> str:
    return normalize(name, address)


def ai_item_id(title: str, location: str, seller_name: str) -> str:
    return f"{AI_ITEM_PREFIX}{normalize(title, location, seller_name)}"


def user_item_id(title: str, category: str, price: str) -> str:
    return f"{USER_ITEM_PREFIX}{normalize(title, category, price)}"
