"""Prompt templates for the AI gateway."""

from sokolink.models.schemas import (
    BusinessCategory,
    CommunityItemCategory,
    ItemCondition,
)

BUSINESS_CATEGORIES = ", ".join(c.value for c in BusinessCategory)
ITEM_CATEGORIES = ", ".join(c.value for c in CommunityItemCategory)
ITEM_CONDITIONS = ", ".join(c.value for c in ItemCondition)


# =============================================================================
# System Prompts
# =============================================================================

JSON_SYSTEM_PROMPT = """You are a data service for "Soko Link", a Kenyan marketplace app.
You answer with JSON only: a single JSON array of objects, no markdown, no explanation.
Use exactly the keys you are given and only the enum values you are given."""

TEXT_SYSTEM_PROMPT = """You are a friendly assistant for "Soko Link", a Kenyan marketplace app.
Keep answers concise and culturally relevant to a Kenyan market context."""


# =============================================================================
# Discovery
# =============================================================================

BUSINESSES_PROMPT = """Act as a local business directory expert. I am looking for "{business_type}" in "{location}".
Please find 3 to 5 relevant local businesses.

Return a JSON array where each object has these keys:
- "name": name of the business
- "address": full physical address
- "phone": primary contact phone number
- "hours": opening hours, e.g. "Mon-Fri 9am-6pm"
- "delivery": true if the business offers delivery
- "price_range": one of $, $$, $$$, $$$$
- "negotiable": true if prices are negotiable
- "category": one of {categories}
- "social_media": object with optional "instagram", "facebook", "website", "twitter" (full URLs) and "whatsapp" (international format, e.g. +254712345678)

It is very important to correctly categorize each business from the provided values."""

COMMUNITY_ITEMS_PROMPT = """Act as a simulator for a Kenyan neighborhood marketplace called "Soko Mtaani".
I am looking for second-hand items being sold by individuals in the "{location}" area.
Please generate a list of 6 diverse items that people would realistically sell (e.g., electronics, furniture, appliances, clothing).

Return a JSON array where each object has these keys:
- "title": catchy title for the item for sale
- "description": brief description of the item, its state, and why it's being sold
- "price": asking price in KES, formatted like "KES 15,000"
- "condition": one of {conditions}
- "category": one of {categories}
- "location": the neighborhood where the item is located
- "seller_name": a plausible Kenyan first name for the seller
- "negotiable": true if the price is negotiable

Make the descriptions and titles sound authentic. Do NOT include an image URL."""


# =============================================================================
# Seller and Buyer Assistance
# =============================================================================

NEGOTIATION_TIP_PROMPT = """You are a friendly and savvy Kenyan negotiation assistant.
A user is interested in an item named "{item_name}".
The user's request is: "{user_message}".

Provide helpful, actionable advice in simple markdown:
- If they ask for a price, suggest a realistic range and a polite way to ask.
- If they ask for a message draft, provide one in both English and Swahili.
- Keep it concise, friendly, and encouraging. Emojis are welcome."""

PRICE_SUGGESTION_PROMPT = """Act as a price suggestion expert for a Kenyan marketplace app.
A user is listing an item and needs help with pricing.
Item Title: "{item_name}"
Item Description: "{item_description}"

Return ONLY the numeric value for a suggested starting price in Kenyan Shillings.
Do not include "KES" or any other text. For KES 15,000 return 15000."""

DESCRIPTION_PROMPT = """Act as a creative copywriter for a Kenyan marketplace app.
A user has provided a title for an item they want to sell: "{item_name}".
Generate a compelling, friendly, and concise description (2-3 sentences) for this item.
Highlight its potential benefits or condition. Make it sound authentic for a peer-to-peer sale.
Return only the description."""


def businesses_prompt(business_type: str, location: str) -> str:
    return BUSINESSES_PROMPT.format(
        business_type=business_type,
        location=location,
        categories=BUSINESS_CATEGORIES,
    )


def community_items_prompt(location: str) -> str:
    return COMMUNITY_ITEMS_PROMPT.format(
        location=location,
        conditions=ITEM_CONDITIONS,
        categories=ITEM_CATEGORIES,
    )
