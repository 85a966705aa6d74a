"""
Core infrastructure modules for Soko Link.

Provides common utilities used across the application:
- exceptions: Standardized exception hierarchy
- identity: Deterministic id derivation for records
- logging_config: structlog configuration
"""

from sokolink.core.exceptions import (
    SokoLinkError,
    ConfigurationError,
    GatewayError,
    GatewayNotConfiguredError,
    GatewayUnavailableError,
    GatewayResponseError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

from sokolink.core.identity import (
    SELLER_PROFILE_ID,
    ai_item_id,
    business_id,
    normalize,
    user_item_id,
)

__all__ = [
    # Exceptions
    "SokoLinkError",
    "ConfigurationError",
    "GatewayError",
    "GatewayNotConfiguredError",
    "GatewayUnavailableError",
    "GatewayResponseError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Identity
    "SELLER_PROFILE_ID",
    "ai_item_id",
    "business_id",
    "normalize",
    "user_item_id",
]
