"""
Configuration Management.

Configuration sources (in order of precedence):
1. Environment variables
2. .env file
3. Default values

Example:
    from sokolink.config import get_settings

    settings = get_settings()
    backend = settings.storage_backend
"""

from sokolink.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
