"""
Soko Link Test Suite.

- unit/: identity, persisted store, storage backends, gateway, marketplace,
  catalog, settings, logging and CLI tests
- conftest.py: Shared fixtures and test configuration

Run tests with: pytest
"""
