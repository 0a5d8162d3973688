"""
============================================================================
Project Appeal Desk v1.0.0
Offer Watcher - Background Job for Offer Resolution Notifications
============================================================================

Reliability Level: L5 High
Traceability: Every resolution is logged with offer_id and partner

This module implements the OfferWatcher background job:
- Keeps a registry of submitted offers, detached from the HTTP request
- Periodically polls the gateway for the state of each watched offer
- Emits exactly one Discord notification when an offer is accepted or declined
- Drops offers that end in any other terminal state without notifying

There is no watch timeout; offers leave the registry only when the trading
network reports a terminal state or the process shuts down.

============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import asyncio
import logging

from app.exchange.session_gateway import GatewayError, SessionGateway
from app.observability.metrics import record_offer_resolution
from services.appeal_models import OfferState, TERMINAL_OFFER_STATES

logger = logging.getLogger(__name__)


@dataclass
class WatchedOffer:
    """Offer registered for accepted / declined notifications."""
    offer_id: str
    partner_steam_id: str
    registered_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_state: Optional[OfferState] = None

    def watched_seconds(self, now: Optional[datetime] = None) -> float:
        return ((now or datetime.now(timezone.utc)) - self.registered_at).total_seconds()


class OfferWatcher:
    """
    Background job delivering offer resolution notifications.

    Reliability Level: L5 High
    Input Constraints: Gateway must support get_offer_state()
    Side Effects: Gateway polling, Discord notifications, metrics updates
    """

    def __init__(
        self,
        gateway: SessionGateway,
        notifier: Any,
        interval_seconds: int = 30,
    ) -> None:
        """
        Args:
            gateway: Session gateway used to read offer states
            notifier: DiscordNotifier (notify_accepted / notify_declined)
            interval_seconds: Interval between polls (default: 30)
        """
        if interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be positive, got: {interval_seconds}"
            )

        self._gateway = gateway
        self._notifier = notifier
        self._interval_seconds = interval_seconds
        self._offers: Dict[str, WatchedOffer] = {}
        self._running = False
        self._task: Optional[asyncio.Task] = None

        logger.info(
            f"[OFFER-WATCHER] Initialized | interval_seconds={interval_seconds}"
        )

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def watched_offer_ids(self) -> List[str]:
        return list(self._offers)

    def get_watched_offer(self, offer_id: str) -> Optional[WatchedOffer]:
        return self._offers.get(offer_id)

    def watch(self, offer_id: str, partner_steam_id: str) -> None:
        """
        Register an offer; re-registering the same id is a no-op.

        Side Effects: Adds the offer to the registry
        """
        if offer_id in self._offers:
            return

        self._offers[offer_id] = WatchedOffer(
            offer_id=offer_id,
            partner_steam_id=partner_steam_id,
        )
        logger.info(
            f"[OFFER-WATCHER] Watching offer | offer_id={offer_id} | "
            f"partner={partner_steam_id}"
        )

    async def start(self) -> None:
        if self._running:
            logger.warning("[OFFER-WATCHER] Already running, ignoring start request")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"[OFFER-WATCHER] Started | interval_seconds={self._interval_seconds}")

    async def stop(self) -> None:
        if not self._running:
            logger.warning("[OFFER-WATCHER] Not running, ignoring stop request")
            return

        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        now = datetime.now(timezone.utc)
        for watched in self._offers.values():
            last_state = watched.last_state.name if watched.last_state is not None else "UNKNOWN"
            logger.info(
                f"[OFFER-WATCHER] Unresolved at shutdown | offer_id={watched.offer_id} | "
                f"partner={watched.partner_steam_id} | last_state={last_state} | "
                f"watched_seconds={int(watched.watched_seconds(now))}"
            )

        logger.info(
            f"[OFFER-WATCHER] Stopped | unresolved_offers={len(self._offers)}"
        )

    async def _run_loop(self) -> None:
        while self._running:
            try:
                resolved = await self.poll_once()
                if resolved:
                    logger.info(f"[OFFER-WATCHER] Resolved {resolved} offers")
            except Exception as e:
                logger.error(f"[OFFER-WATCHER] Error in main loop | error={str(e)}")

            try:
                await asyncio.sleep(self._interval_seconds)
            except asyncio.CancelledError:
                break

    async def poll_once(self) -> int:
        """
        Check every watched offer once.

        A gateway error leaves the offer watched for the next poll.

        Returns:
            Number of offers that left the registry
        """
        resolved = 0

        for watched in list(self._offers.values()):
            try:
                state = await self._gateway.get_offer_state(watched.offer_id)
            except GatewayError as e:
                logger.warning(
                    f"[OFFER-WATCHER] State lookup failed | "
                    f"offer_id={watched.offer_id} | error={e}"
                )
                continue

            watched.last_state = state

            if state not in TERMINAL_OFFER_STATES:
                continue

            self._offers.pop(watched.offer_id, None)
            resolved += 1
            record_offer_resolution(state.name.lower())

            if state == OfferState.ACCEPTED:
                self._notifier.notify_accepted(watched.partner_steam_id)
            elif state == OfferState.DECLINED:
                self._notifier.notify_declined(watched.partner_steam_id)

            logger.info(
                f"[OFFER-WATCHER] Offer resolved | offer_id={watched.offer_id} | "
                f"partner={watched.partner_steam_id} | state={state.name} | "
                f"watched_seconds={int(watched.watched_seconds())}"
            )

        return resolved
