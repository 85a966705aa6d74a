"""
Claude-backed AI gateway.

Finds local businesses and Soko Mtaani items, and helps buyers and sellers with
negotiation tips, listing descriptions and price suggestions.

Standalone usage:
    from sokolink.gateway import AnthropicGateway
    gateway = AnthropicGateway()
    businesses = await gateway.find_businesses("Vibanda vya mboga", "Buru Buru")
"""

import json
import re
from typing import Any, Optional

import anthropic
import structlog

from sokolink.config.settings import Settings, get_settings
from sokolink.core.exceptions import (
    GatewayNotConfiguredError,
    GatewayResponseError,
    GatewayUnavailableError,
)
from sokolink.gateway import prompts
from sokolink.gateway.validation import validate_records
from sokolink.models.schemas import BusinessDraft, CommunityItemDraft

logger = structlog.get_logger(__name__)


# =============================================================================
# User-facing Messages
# =============================================================================

NOT_CONFIGURED_MESSAGE = (
    "The AI service is not available. Please contact the administrator "
    "to ensure it's configured correctly."
)
BUSINESSES_FAILED_MESSAGE = "Failed to find businesses. The AI may be busy, please try again."
COMMUNITY_ITEMS_FAILED_MESSAGE = "Failed to find community items."
TIP_FALLBACK_MESSAGE = (
    "Sorry, I couldn't get a tip right now. The AI might be busy. "
    "Please try again in a moment. 🙏"
)

_NON_DIGIT = re.compile(r"[^0-9]")


class AnthropicGateway:
    """
    Marketplace gateway on the Anthropic Messages API.

    The client is only created when an API key is configured; without one,
    every call raises GatewayNotConfiguredError.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        self._settings = settings or get_settings()
        self.model = self._settings.gateway_model
        self.max_tokens = self._settings.gateway_max_tokens

        if client is not None:
            self._client: Optional[anthropic.AsyncAnthropic] = client
        elif self._settings.gateway_configured:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._settings.anthropic_api_key.get_secret_value(),
                timeout=self._settings.gateway_timeout_seconds,
            )
        else:
            self._client = None
            logger.warning("gateway_not_configured")

    def _check_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            raise GatewayNotConfiguredError(
                "ANTHROPIC_API_KEY is not set",
                user_message=NOT_CONFIGURED_MESSAGE,
            )
        return self._client

    async def _complete(self, prompt: str, system: str) -> str:
        """Send a single-turn prompt and return the concatenated text blocks."""
        client = self._check_client()
        response = await client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

    def _parse_json(self, text: str) -> Any:
        """Parse JSON from Claude's response, tolerating markdown fences."""
        text = text.strip()

        if text.startswith("```"):
            lines = text.split("\n")
            if lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines)

        try:
            return json.loads(text)
        except json.JSONDecodeError:
            match = re.search(r"\[[\s\S]*\]", text)
            if match:
                try:
                    return json.loads(match.group())
                except json.JSONDecodeError:
                    pass
            raise GatewayResponseError(
                f"Could not parse JSON from response: {text[:500]}",
            )

    async def _find(
        self,
        prompt: str,
        model: type,
        endpoint: str,
        failure_message: str,
    ) -> list:
        """Run a list endpoint: complete, parse, validate."""
        self._check_client()
        try:
            text = await self._complete(prompt, prompts.JSON_SYSTEM_PROMPT)
        except anthropic.APIError as e:
            logger.error("gateway_request_failed", endpoint=endpoint, error=str(e))
            raise GatewayUnavailableError(
                f"{endpoint} request failed: {e}",
                user_message=failure_message,
            )

        if not text.strip():
            logger.error("gateway_empty_response", endpoint=endpoint)
            return []

        try:
            payload = self._parse_json(text)
        except GatewayResponseError as e:
            logger.error("gateway_unparsable_response", endpoint=endpoint, error=e.message)
            raise GatewayResponseError(e.message, user_message=failure_message)

        result = validate_records(payload, model)
        if not result.ok:
            logger.error("gateway_invalid_payload", endpoint=endpoint, error=result.error)
            raise GatewayResponseError(
                result.error or "Invalid payload",
                user_message=failure_message,
            )

        if result.rejected:
            logger.warning(
                "gateway_records_rejected",
                endpoint=endpoint,
                rejected=len(result.rejected),
                indexes=[r.index for r in result.rejected],
            )

        logger.info("gateway_records_received", endpoint=endpoint, count=len(result.records))
        return result.records

    async def find_businesses(self, business_type: str, location: str) -> list[BusinessDraft]:
        """Find 3-5 local businesses matching a type near a location."""
        return await self._find(
            prompts.businesses_prompt(business_type, location),
            BusinessDraft,
            "find_businesses",
            BUSINESSES_FAILED_MESSAGE,
        )

    async def find_community_items(self, location: str) -> list[CommunityItemDraft]:
        """Generate second-hand listings for a neighbourhood."""
        return await self._find(
            prompts.community_items_prompt(location),
            CommunityItemDraft,
            "find_community_items",
            COMMUNITY_ITEMS_FAILED_MESSAGE,
        )

    async def get_negotiation_tip(self, item_name: str, user_message: str) -> str:
        """Negotiation advice for a buyer. Falls back to an apology on failure."""
        self._check_client()
        prompt = prompts.NEGOTIATION_TIP_PROMPT.format(
            item_name=item_name, user_message=user_message
        )
        try:
            return await self._complete(prompt, prompts.TEXT_SYSTEM_PROMPT)
        except anthropic.APIError as e:
            logger.error("negotiation_tip_failed", item_name=item_name, error=str(e))
            return TIP_FALLBACK_MESSAGE

    async def suggest_price(self, item_name: str, item_description: str) -> str:
        """
        Suggest a starting price in KES.

        Returns:
            Digits only, "0" when the model gave no number, "" on failure.
        """
        self._check_client()
        prompt = prompts.PRICE_SUGGESTION_PROMPT.format(
            item_name=item_name, item_description=item_description
        )
        try:
            text = await self._complete(prompt, prompts.TEXT_SYSTEM_PROMPT)
        except anthropic.APIError as e:
            logger.error("price_suggestion_failed", item_name=item_name, error=str(e))
            return ""
        return _NON_DIGIT.sub("", text.strip()) or "0"

    async def generate_description(self, item_name: str) -> str:
        """Write a 2-3 sentence listing description. Empty string on failure."""
        self._check_client()
        prompt = prompts.DESCRIPTION_PROMPT.format(item_name=item_name)
        try:
            text = await self._complete(prompt, prompts.TEXT_SYSTEM_PROMPT)
        except anthropic.APIError as e:
            logger.error("description_failed", item_name=item_name, error=str(e))
            return ""
        return text.strip()
