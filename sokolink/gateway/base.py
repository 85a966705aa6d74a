"""AI gateway interface consumed by the marketplace controller."""

from typing import Protocol

from sokolink.models.schemas import BusinessDraft, CommunityItemDraft


class MarketplaceGateway(Protocol):
    """Protocol for discovery and suggestion backends.

    List endpoints raise GatewayError subclasses on failure. Text endpoints
    degrade to a fallback string instead, except when the gateway is not
    configured at all.
    """

    async def find_businesses(
        self, business_type: str, location: str
    ) -> list[BusinessDraft]: ...

    async def find_community_items(self, location: str) -> list[CommunityItemDraft]: ...

    async def get_negotiation_tip(self, item_name: str, user_message: str) -> str: ...

    async def suggest_price(self, item_name: str, item_description: str) -> str: ...

    async def generate_description(self, item_name: str) -> str: ...
