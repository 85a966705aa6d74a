"""
Pytest Configuration and Shared Fixtures.

This module provides common fixtures for all tests:

- backend / store: in-memory persisted store
- gateway: AsyncMock standing in for the AI gateway
- marketplace: controller wired to both, with a fixed clock
- business_draft / item_draft / listing_draft: sample records
- captured_logs: structlog events emitted during the test (autouse)
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from structlog.testing import capture_logs

from sokolink.models.schemas import (
    BusinessDraft,
    CommunityItemDraft,
    CommunityItemCategory,
    ItemCondition,
)
from sokolink.services.marketplace import Marketplace
from sokolink.storage.backends import InMemoryBackend
from sokolink.storage.persisted_store import PersistedStore

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events so nothing is printed to stdout."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend) -> PersistedStore:
    return PersistedStore(backend)


@pytest.fixture
def gateway() -> AsyncMock:
    """Gateway returning no results unless a test says otherwise."""
    mock = AsyncMock()
    mock.find_businesses.return_value = []
    mock.find_community_items.return_value = []
    return mock


@pytest.fixture
def marketplace(gateway, store) -> Marketplace:
    return Marketplace(gateway=gateway, store=store, clock=lambda: FIXED_NOW)


@pytest.fixture
def business_draft() -> BusinessDraft:
    """Return a sample business as the gateway would."""
    return BusinessDraft(
        name="Mama Njeri Groceries",
        address="Buru Buru Phase 1",
        phone="+254712345678",
        hours="Mon-Sat 7am-8pm",
        delivery=True,
        price_range="$",
        negotiable=True,
        category="shop",
    )


@pytest.fixture
def item_draft() -> CommunityItemDraft:
    """Return a sample Soko Mtaani item as the gateway would."""
    return CommunityItemDraft(
        title="Samsung 32-inch TV",
        description="Works perfectly, moving house.",
        price="KES 15,000",
        condition=ItemCondition.USED_GOOD,
        category=CommunityItemCategory.ELECTRONICS,
        location="Buru Buru",
        seller_name="Wanjiku",
        negotiable=True,
    )


@pytest.fixture
def listing_draft() -> CommunityItemDraft:
    """Return a sample seller listing."""
    return CommunityItemDraft(
        title="Sofa",
        description="3-seater, lightly used.",
        price="Ksh 12,000",
        condition=ItemCondition.USED_LIKE_NEW,
        category=CommunityItemCategory.FURNITURE,
        location="Main St",
        seller_name="You",
        negotiable=True,
    )
