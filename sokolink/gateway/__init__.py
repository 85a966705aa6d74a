"""
AI gateway for discovery and listing assistance.

- base: MarketplaceGateway protocol
- anthropic_gateway: Claude implementation
- validation: schema validation of gateway payloads
"""

from sokolink.gateway.anthropic_gateway import AnthropicGateway
from sokolink.gateway.base import MarketplaceGateway
from sokolink.gateway.validation import RecordValidation, RejectedRecord, validate_records

__all__ = [
    "AnthropicGateway",
    "MarketplaceGateway",
    "RecordValidation",
    "RejectedRecord",
    "validate_records",
]
