"""
Core exception hierarchy for Soko Link.

Gateway errors carry a user-facing message alongside the technical one so the
view layer can surface a single string without leaking internals.
"""

from typing import Any, Optional


# =============================================================================
# Base Exceptions
# =============================================================================


class SokoLinkError(Exception):
    """Base exception for all Soko Link errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SokoLinkError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)


# =============================================================================
# Gateway Errors
# =============================================================================


class GatewayError(SokoLinkError):
    """Base exception for AI gateway failures."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.user_message = user_message or message
        super().__init__(message, details)


class GatewayNotConfiguredError(GatewayError):
    """Raised when the gateway is called without an API key."""

    pass


class GatewayUnavailableError(GatewayError):
    """Raised when the AI service rejects or fails a request."""

    pass


class GatewayResponseError(GatewayError):
    """Raised when the AI service answers with an unusable payload."""

    pass


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(SokoLinkError):
    """Base exception for persisted store backends."""

    def __init__(self, key: str, message: str, details: Optional[dict[str, Any]] = None):
        self.key = key
        super().__init__(f"[{key}] {message}", details)


class StorageReadError(StorageError):
    """Raised when a backend cannot read a key."""

    pass


class StorageWriteError(StorageError):
    """Raised when a backend cannot write a key."""

    pass
