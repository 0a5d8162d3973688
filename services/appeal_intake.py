"""
============================================================================
Project Appeal Desk v1.0.0
Appeal Intake Service - Request to Trade Offer Pipeline
============================================================================

Reliability Level: L6 Critical
Input Constraints: Trade URL using https://, optional description
Side Effects:
    - Sends one trade offer per successful appeal
    - Queues Discord notifications (held / sent)
    - Registers the offer with the OfferWatcher (accepted / declined)

INTAKE FLOW (strictly sequential per request):
1. Validate trade URL
2. Resolve partner Steam id
3. Fetch partner inventory (TF2, app 440 / context 2, tradable only)
4. Apply eligibility filter
5. Build offer draft
6. Submit, then branch on sent / pending

Every external failure is converted to a static AppealError. No retries,
no rollback: the only side effects are the offer itself and notifications.

============================================================================
"""

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse
import logging

from app.exchange.session_gateway import InvalidTradeUrlError, SessionGateway
from app.logic.item_filter import filter_eligible_items
from services.appeal_models import (
    HoldPolicyError,
    NoEligibleItemsError,
    SubmissionError,
    TradeOfferDraft,
    UpstreamError,
    ValidationError,
    TF2_APP_ID,
    TF2_CONTEXT_ID,
)
from services.offer_watcher import OfferWatcher

logger = logging.getLogger(__name__)


SECURE_URL_PREFIX = "https://"


@dataclass(frozen=True)
class AppealResult:
    """Successful appeal: the offer was sent and not held."""
    offer_id: str
    partner_steam_id: str
    items_count: int


def validate_trade_url(trade_url: Any) -> str:
    """
    Require a non-empty https:// URL with a host.

    Raises:
        ValidationError: APL-001
    """
    if not isinstance(trade_url, str) or not trade_url.startswith(SECURE_URL_PREFIX):
        raise ValidationError()

    if not urlparse(trade_url).netloc:
        raise ValidationError()

    return trade_url


class AppealIntakeService:
    """
    Orchestrates one appeal from request to offer.

    Reliability Level: L6 Critical
    Input Constraints: Gateway logged in, notifier initialized
    Side Effects: Trade offer, notifications, offer watch registration
    """

    def __init__(
        self,
        gateway: SessionGateway,
        notifier: Any,
        offer_watcher: Optional[OfferWatcher] = None,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._offer_watcher = offer_watcher

    async def submit_appeal(
        self,
        trade_url: Any,
        description: Optional[str] = None
    ) -> AppealResult:
        """
        Run the intake flow.

        Raises:
            ValidationError: Missing/insecure trade URL or no partner id
            UpstreamError: Inventory could not be fetched
            NoEligibleItemsError: Nothing passed the eligibility filter
            SubmissionError: Offer could not be sent
            HoldPolicyError: Network would hold the offer (escrow)
        """
        # STEP 1: Validate
        trade_url = validate_trade_url(trade_url)

        # STEP 2: Resolve partner
        try:
            partner = self._gateway.resolve_partner(trade_url)
        except InvalidTradeUrlError as e:
            logger.info(f"[APPEAL_REJECTED] reason=no_partner | error={e.message}")
            raise ValidationError() from e

        # STEP 3: Fetch inventory
        try:
            inventory = await self._gateway.fetch_inventory(
                partner,
                TF2_APP_ID,
                TF2_CONTEXT_ID,
                tradable_only=True
            )
        except Exception as e:
            logger.error(
                f"[{UpstreamError.error_code}] Inventory fetch failed | "
                f"partner={partner} | error={e}"
            )
            raise UpstreamError() from e

        # STEP 4: Filter
        eligible = filter_eligible_items(inventory)
        if not eligible:
            logger.info(
                f"[APPEAL_REJECTED] reason=no_eligible_items | partner={partner} | "
                f"inventory_size={len(inventory)}"
            )
            raise NoEligibleItemsError()

        # STEP 5: Build offer
        draft = TradeOfferDraft(trade_url=trade_url, partner_steam_id=partner)
        for item in eligible:
            draft.add_their_item(item)
        draft.set_message(description)

        # STEP 6: Submit
        try:
            submission = await self._gateway.send_offer(draft)
        except Exception as e:
            logger.error(
                f"[{SubmissionError.error_code}] Offer send failed | "
                f"partner={partner} | items={len(eligible)} | error={e}"
            )
            raise SubmissionError() from e

        draft.mark_submitted()

        if self._offer_watcher is not None:
            self._offer_watcher.watch(submission.offer_id, partner)

        if submission.is_held:
            logger.warning(
                f"[APPEAL_HELD] offer_id={submission.offer_id} | partner={partner}"
            )
            self._notify(self._notifier.notify_held, partner, trade_url)
            raise HoldPolicyError()

        self._notify(self._notifier.notify_sent, partner, trade_url, draft.item_names)

        logger.info(
            f"[APPEAL_SENT] offer_id={submission.offer_id} | partner={partner} | "
            f"items={len(eligible)}"
        )

        return AppealResult(
            offer_id=submission.offer_id,
            partner_steam_id=partner,
            items_count=len(eligible),
        )

    def _notify(self, send, *args: Any) -> None:
        # Notification failures never change the appeal outcome
        try:
            send(*args)
        except Exception as e:
            logger.error(f"[DISCORD_NOTIFY_ERROR] error={e}")
