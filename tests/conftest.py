"""
============================================================================
Shared Test Fixtures - Appeal Desk
============================================================================

Provides an in-memory SessionGateway and a recording notifier so tests
never touch Steam or Discord.

============================================================================
"""

from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

from app.exchange.session_gateway import SessionGateway
from services.appeal_models import (
    InventoryItem,
    ItemTag,
    OfferState,
    OfferStatus,
    OfferSubmission,
    TradeOfferDraft,
)


def _build_item(name: str, *tag_names: str, asset_id: Optional[str] = None) -> InventoryItem:
    return InventoryItem(
        asset_id=asset_id or name.replace(" ", "_").lower(),
        name=name,
        tags=tuple(ItemTag(name=t) for t in tag_names),
    )


class FakeSessionGateway(SessionGateway):
    """SessionGateway double recording every call."""

    def __init__(self) -> None:
        self.inventory: List[InventoryItem] = []
        self.inventory_error: Optional[Exception] = None
        self.send_error: Optional[Exception] = None
        self.send_status = OfferStatus.SENT
        self.offer_states: Dict[str, OfferState] = {}
        self.state_errors: Dict[str, Exception] = {}
        self.session_alive = True
        self.renew_error: Optional[Exception] = None

        self.started = False
        self.closed = False
        self.inventory_calls: List[tuple] = []
        self.sent_drafts: List[TradeOfferDraft] = []
        self.renew_calls = 0

    async def start(self) -> None:
        self.started = True

    async def fetch_inventory(self, partner_steam_id, app_id, context_id, tradable_only=True):
        self.inventory_calls.append((partner_steam_id, app_id, context_id, tradable_only))
        if self.inventory_error is not None:
            raise self.inventory_error
        return list(self.inventory)

    async def send_offer(self, draft: TradeOfferDraft) -> OfferSubmission:
        self.sent_drafts.append(draft)
        if self.send_error is not None:
            raise self.send_error
        return OfferSubmission(offer_id=f"offer-{len(self.sent_drafts)}", status=self.send_status)

    async def get_offer_state(self, offer_id: str) -> OfferState:
        if offer_id in self.state_errors:
            raise self.state_errors[offer_id]
        return self.offer_states.get(offer_id, OfferState.ACTIVE)

    async def is_session_alive(self) -> bool:
        return self.session_alive

    async def renew_session(self) -> None:
        self.renew_calls += 1
        if self.renew_error is not None:
            raise self.renew_error
        self.session_alive = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_gateway() -> FakeSessionGateway:
    return FakeSessionGateway()


@pytest.fixture
def mock_notifier() -> Mock:
    """Notifier double exposing the four lifecycle methods."""
    notifier = Mock()
    notifier.notify_held = Mock()
    notifier.notify_sent = Mock()
    notifier.notify_accepted = Mock()
    notifier.notify_declined = Mock()
    return notifier


@pytest.fixture
def make_item():
    """Factory building an InventoryItem from a name and tag names."""
    return _build_item


@pytest.fixture
def eligible_inventory() -> List[InventoryItem]:
    return [
        _build_item("Strange Scattergun", "Strange", "Primary weapon"),
        _build_item("Team Spirit Paint Can", "Tool"),
        _build_item("Decorated Weapon", "Decorated"),
        _build_item("Burning Flames Team Captain", "Unusual", "Cosmetic"),
    ]
