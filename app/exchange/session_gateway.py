"""
============================================================================
Project Appeal Desk v1.0.0
Session Gateway - Abstract Interface to the Trading Network
============================================================================

Reliability Level: L6 Critical
Input Constraints: Authenticated trading session established at startup
Side Effects: Network I/O performed by implementations

GATEWAY INTERFACE:
    The appeal handler never talks to the trading network directly. It
    receives a SessionGateway injected at startup and awaits one call at a
    time:
    1. resolve_partner(trade_url) - Partner Steam id from a trade URL
    2. fetch_inventory(partner, app_id, context_id) - Tradable items
    3. send_offer(draft) - Submit the offer, report sent / pending
    4. get_offer_state(offer_id) - Current ETradeOfferState
    5. is_session_alive() / renew_session() - Session upkeep
    6. close() - Teardown at shutdown

ERROR CODES:
    - GW-001: Trade URL carries no usable partner id
    - GW-002: Inventory lookup failed
    - GW-003: Offer submission failed
    - GW-004: Offer state lookup failed
    - GW-005: Login or session renewal failed

============================================================================
"""

from abc import ABC, abstractmethod
from typing import List
from urllib.parse import parse_qs, urlparse

from services.appeal_models import (
    InventoryItem,
    OfferState,
    OfferSubmission,
    TradeOfferDraft,
)


# Offset between a 32-bit account id and its 64-bit individual Steam id
STEAM_ID64_BASE = 76561197960265728


# =============================================================================
# Error Codes
# =============================================================================

class GatewayErrorCode:
    """Gateway-specific error codes for audit logging."""
    INVALID_TRADE_URL = "GW-001"
    INVENTORY_FAIL = "GW-002"
    SEND_FAIL = "GW-003"
    STATE_FAIL = "GW-004"
    SESSION_FAIL = "GW-005"


class GatewayError(Exception):
    """Raised when the trading network rejects or fails a call."""

    def __init__(self, message: str, error_code: str) -> None:
        self.error_code = error_code
        self.message = message
        super().__init__(f"[{error_code}] {message}")


class InvalidTradeUrlError(GatewayError):
    """Raised when a trade URL has no usable partner id."""

    def __init__(self, trade_url: str) -> None:
        super().__init__(
            f"Trade URL has no usable partner id: {trade_url}",
            GatewayErrorCode.INVALID_TRADE_URL
        )


# =============================================================================
# URL Utility
# =============================================================================

def partner_steam_id_from_trade_url(trade_url: str) -> str:
    """
    Derive the partner's 64-bit Steam id from a trade URL.

    Trade URLs carry the 32-bit account id in the ``partner`` query value,
    e.g. ``https://steamcommunity.com/tradeoffer/new/?partner=12345&token=abc``.

    Raises:
        InvalidTradeUrlError: If the partner value is missing or not numeric
    """
    query = parse_qs(urlparse(trade_url).query)
    values = query.get("partner") or []

    if not values or not values[0].strip().isdigit():
        raise InvalidTradeUrlError(trade_url)

    account_id = int(values[0].strip())
    return str(STEAM_ID64_BASE + account_id)


# =============================================================================
# Session Gateway Base Class
# =============================================================================

class SessionGateway(ABC):
    """
    Process-wide gateway to the trading network.

    Implementations are created once in the application lifespan and shared
    by every request. Each method is awaited in strict sequence by the
    caller; no method is expected to be called concurrently for the same
    offer.

    Reliability Level: L6 Critical
    Side Effects: Network I/O, session state
    """

    def resolve_partner(self, trade_url: str) -> str:
        """
        Partner Steam id for a trade URL.

        Raises:
            InvalidTradeUrlError: If the URL carries no partner id
        """
        return partner_steam_id_from_trade_url(trade_url)

    @abstractmethod
    async def start(self) -> None:
        """Log in and establish the trading session."""

    @abstractmethod
    async def fetch_inventory(
        self,
        partner_steam_id: str,
        app_id: int,
        context_id: int,
        tradable_only: bool = True
    ) -> List[InventoryItem]:
        """
        Partner inventory for an application/context pair.

        Raises:
            GatewayError: GW-002 on any lookup failure
        """

    @abstractmethod
    async def send_offer(self, draft: TradeOfferDraft) -> OfferSubmission:
        """
        Submit an offer built from a draft.

        Raises:
            GatewayError: GW-003 on any submission failure
        """

    @abstractmethod
    async def get_offer_state(self, offer_id: str) -> OfferState:
        """
        Current state of a previously sent offer.

        Raises:
            GatewayError: GW-004 on lookup failure
        """

    @abstractmethod
    async def is_session_alive(self) -> bool:
        """Whether the web session cookies are still accepted."""

    @abstractmethod
    async def renew_session(self) -> None:
        """
        Log in again and replace the session cookies.

        Raises:
            GatewayError: GW-005 on login failure
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the session at shutdown."""
