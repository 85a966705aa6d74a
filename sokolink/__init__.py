"""
Soko Link - marketplace directory for local businesses and neighbourhood listings.

This package contains the core modules for Soko Link:
- core: exception hierarchy, identity scheme and logging setup
- config: Pydantic settings
- models: record schemas (businesses, community items, conversations, profile)
- storage: persisted store and its key-value backends
- gateway: AI gateway used for discovery, tips, descriptions and prices
- services: the marketplace controller and catalog helpers
"""

__version__ = "0.1.0"
