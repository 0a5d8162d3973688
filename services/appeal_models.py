"""
============================================================================
Project Appeal Desk v1.0.0
Appeal Intake - Domain Models and Error Taxonomy
============================================================================

Reliability Level: L5 High
Input Constraints: Items sourced from the Steam inventory endpoint
Side Effects: None (pure data structures)

This module defines the shapes that flow through an appeal:
- InventoryItem / ItemTag: read-only view of a partner's inventory item
- TradeOfferDraft: mutable accumulation of requested items, frozen on submit
- OfferSubmission: gateway answer to a send
- NotificationEvent: lifecycle milestones forwarded to Discord
- AppealError hierarchy: every failure the intake handler can report

ERROR CODES:
    - APL-001: Invalid trade URL
    - APL-002: Inventory fetch failed
    - APL-003: No eligible items
    - APL-004: Offer submission failed
    - APL-005: Offer held by escrow

============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


# =============================================================================
# Constants
# =============================================================================

# Team Fortress 2 application / context pair
TF2_APP_ID = 440
TF2_CONTEXT_ID = 2

DEFAULT_OFFER_MESSAGE = "Appeal item validation"

STEAM_PROFILE_URL_TEMPLATE = "https://steamcommunity.com/profiles/{steam_id}"


# =============================================================================
# Enums
# =============================================================================

class OfferStatus(str, Enum):
    """
    Status reported by the gateway right after a send.

    PENDING means the network is holding the offer (escrow or unconfirmed).
    """
    SENT = "sent"
    PENDING = "pending"


class OfferState(IntEnum):
    """Steam ETradeOfferState values."""
    INVALID = 1
    ACTIVE = 2
    ACCEPTED = 3
    COUNTERED = 4
    EXPIRED = 5
    CANCELED = 6
    DECLINED = 7
    INVALID_ITEMS = 8
    CREATED_NEEDS_CONFIRMATION = 9
    CANCELED_BY_SECOND_FACTOR = 10
    IN_ESCROW = 11


# States after which an offer can no longer be accepted or declined
TERMINAL_OFFER_STATES = frozenset({
    OfferState.INVALID,
    OfferState.ACCEPTED,
    OfferState.COUNTERED,
    OfferState.EXPIRED,
    OfferState.CANCELED,
    OfferState.DECLINED,
    OfferState.INVALID_ITEMS,
    OfferState.CANCELED_BY_SECOND_FACTOR,
})


class NotificationEvent(str, Enum):
    """Lifecycle milestones that produce exactly one Discord message."""
    HELD = "held"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"


# =============================================================================
# Inventory
# =============================================================================

@dataclass(frozen=True)
class ItemTag:
    """Single descriptive tag attached to an inventory item."""
    name: str


@dataclass(frozen=True)
class InventoryItem:
    """
    Read-only inventory item, lifetime = one request.

    Reliability Level: L5 High
    Input Constraints: name required, tags keep the order Steam returns
    Side Effects: None
    """
    asset_id: str
    name: str
    tags: tuple = ()
    tradable: bool = True

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]

    @classmethod
    def from_steam(cls, asset_id: str, raw: Dict[str, Any]) -> "InventoryItem":
        """
        Build an item from a merged asset/description dict.

        Tags from the inventory endpoint carry ``localized_tag_name``;
        older payloads only carry ``name``.
        """
        tags = []
        for raw_tag in raw.get("tags") or []:
            tag_name = raw_tag.get("localized_tag_name") or raw_tag.get("name")
            if tag_name:
                tags.append(ItemTag(name=str(tag_name)))

        name = raw.get("name") or raw.get("market_hash_name") or ""

        return cls(
            asset_id=str(raw.get("id") or raw.get("assetid") or asset_id),
            name=str(name),
            tags=tuple(tags),
            tradable=bool(int(raw.get("tradable", 1))),
        )


# =============================================================================
# Trade Offer Draft
# =============================================================================

class OfferAlreadySubmittedError(Exception):
    """Raised when a submitted draft is mutated."""
    pass


@dataclass
class TradeOfferDraft:
    """
    Offer under construction.

    Items are requested from the partner ("their items"); nothing is given.
    The draft becomes immutable once mark_submitted() is called.
    """
    trade_url: str
    partner_steam_id: str
    their_items: List[InventoryItem] = field(default_factory=list)
    message: str = DEFAULT_OFFER_MESSAGE
    _submitted: bool = field(default=False, repr=False)

    @property
    def is_submitted(self) -> bool:
        return self._submitted

    @property
    def item_names(self) -> List[str]:
        return [item.name for item in self.their_items]

    def add_their_item(self, item: InventoryItem) -> None:
        self._ensure_mutable()
        self.their_items.append(item)

    def set_message(self, message: Optional[str]) -> None:
        self._ensure_mutable()
        self.message = message or DEFAULT_OFFER_MESSAGE

    def mark_submitted(self) -> None:
        self._ensure_mutable()
        self._submitted = True

    def _ensure_mutable(self) -> None:
        if self._submitted:
            raise OfferAlreadySubmittedError(
                f"Offer for partner {self.partner_steam_id} was already submitted"
            )


@dataclass(frozen=True)
class OfferSubmission:
    """Gateway answer to a successful send."""
    offer_id: str
    status: OfferStatus

    @property
    def is_held(self) -> bool:
        return self.status == OfferStatus.PENDING


def steam_profile_url(steam_id: str) -> str:
    return STEAM_PROFILE_URL_TEMPLATE.format(steam_id=steam_id)


# =============================================================================
# Error Taxonomy
# =============================================================================

class AppealErrorCode:
    """Appeal intake error codes for audit logging."""
    INVALID_TRADE_URL = "APL-001"
    INVENTORY_FETCH_FAILED = "APL-002"
    NO_ELIGIBLE_ITEMS = "APL-003"
    SUBMISSION_FAILED = "APL-004"
    ESCROW_HOLD = "APL-005"


class AppealError(Exception):
    """
    Base class for every outcome reported to the HTTP caller as a failure.

    The message is static and safe to return; the underlying cause is kept
    on ``__cause__`` for logging only.

    Reliability Level: L5 High
    """
    status_code = 500
    error_code = ""
    message = "Appeal failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(f"[{self.error_code}] {self.message}")


class ValidationError(AppealError):
    """Client supplied a missing or insecure trade URL."""
    status_code = 400
    error_code = AppealErrorCode.INVALID_TRADE_URL
    message = "Invalid trade URL"


class UpstreamError(AppealError):
    """The trading network could not return the partner inventory."""
    status_code = 500
    error_code = AppealErrorCode.INVENTORY_FETCH_FAILED
    message = "Inventory fetch failed"


class NoEligibleItemsError(AppealError):
    """Nothing in the inventory passed the eligibility filter."""
    status_code = 400
    error_code = AppealErrorCode.NO_ELIGIBLE_ITEMS
    message = "No tradable items matched."


class SubmissionError(AppealError):
    """The offer could not be sent."""
    status_code = 500
    error_code = AppealErrorCode.SUBMISSION_FAILED
    message = "Offer failed to send"


class HoldPolicyError(AppealError):
    """
    Blocked business outcome, not a transport failure.

    The network would hold the offer for 15 days (escrow).
    """
    status_code = 400
    error_code = AppealErrorCode.ESCROW_HOLD
    message = "Trade would be held for 15 days. Offer not sent."
