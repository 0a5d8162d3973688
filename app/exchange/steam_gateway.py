"""
============================================================================
Project Appeal Desk v1.0.0
Steam Session Gateway - steampy Integration
============================================================================

Reliability Level: L6 Critical
Purpose: SessionGateway backed by a logged-in steampy SteamClient

GATEWAY MANDATE:
  - One SteamClient per process, created at startup
  - Steam Guard codes and mobile confirmations use the bot secrets
  - Blocking steampy calls run in the default thread pool
  - Every steampy failure surfaces as GatewayError (causes chained)
  - No retries; callers decide what a failure means

Error Codes:
  - GW-002 / GW-003 / GW-004 / GW-005 (see session_gateway)

============================================================================
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, List, Optional

from steampy.client import SteamClient
from steampy.models import Asset, GameOptions

from app.exchange.session_gateway import (
    GatewayError,
    GatewayErrorCode,
    SessionGateway,
)
from services.appeal_models import (
    InventoryItem,
    OfferState,
    OfferStatus,
    OfferSubmission,
    TradeOfferDraft,
    TF2_APP_ID,
    TF2_CONTEXT_ID,
)
from services.bot_config import BotConfig

logger = logging.getLogger(__name__)


# Offer states that mean the network has not released the offer yet
HELD_OFFER_STATES = frozenset({
    OfferState.CREATED_NEEDS_CONFIRMATION,
    OfferState.IN_ESCROW,
})

INVENTORY_PAGE_COUNT = 5000


class SteamSessionGateway(SessionGateway):
    """
    Steam trading gateway.

    Reliability Level: L6 Critical
    Side Effects: Network I/O against steamcommunity.com and the Web API

    Example Usage:
        gateway = SteamSessionGateway(BotConfig.from_environment())
        await gateway.start()
        items = await gateway.fetch_inventory(partner, 440, 2)
    """

    def __init__(
        self,
        config: BotConfig,
        client_factory: Optional[Callable[[str], Any]] = None
    ) -> None:
        """
        Args:
            config: Validated bot configuration
            client_factory: Builds a SteamClient from an API key (tests inject fakes)
        """
        self._config = config
        self._client_factory = client_factory or SteamClient
        self._client = None  # type: Optional[Any]

    @property
    def is_logged_in(self) -> bool:
        return self._client is not None

    async def _call(self, func: Callable, *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            functools.partial(func, *args, **kwargs)
        )

    def _require_client(self, error_code: str) -> Any:
        if self._client is None:
            raise GatewayError("Trading session not established", error_code)
        return self._client

    def _login_sync(self) -> Any:
        client = self._client_factory(self._config.api_key)
        client.login(
            self._config.username,
            self._config.password,
            self._config.steam_guard
        )
        return client

    # ========================================================================
    # Session Lifecycle
    # ========================================================================

    async def start(self) -> None:
        """
        Log in to Steam.

        Raises:
            GatewayError: GW-005 if login fails (process-fatal at startup)
        """
        try:
            self._client = await self._call(self._login_sync)
        except Exception as e:
            logger.error(
                f"[{GatewayErrorCode.SESSION_FAIL}] Steam login failed | "
                f"username={self._config.username} | error={e}"
            )
            raise GatewayError("Steam login failed", GatewayErrorCode.SESSION_FAIL) from e

        logger.info(f"[STEAM-GW] Bot logged in | username={self._config.username}")

    async def is_session_alive(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(await self._call(self._client.is_session_alive))
        except Exception as e:
            logger.warning(f"[STEAM-GW] Session check failed | error={e}")
            return False

    async def renew_session(self) -> None:
        """
        Replace the web session with a fresh login.

        Raises:
            GatewayError: GW-005 if login fails
        """
        try:
            client = await self._call(self._login_sync)
        except Exception as e:
            raise GatewayError(
                "Steam session renewal failed", GatewayErrorCode.SESSION_FAIL
            ) from e

        previous, self._client = self._client, client
        logger.info("[STEAM-GW] Web session renewed")

        if previous is not None:
            await self._logout(previous)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await self._logout(client)
        logger.info("[STEAM-GW] Session closed")

    async def _logout(self, client: Any) -> None:
        # Calls already running in the executor may still hold this client
        try:
            await self._call(client.logout)
        except Exception as e:
            logger.warning(f"[STEAM-GW] Logout failed | error={e}")

    # ========================================================================
    # Inventory
    # ========================================================================

    async def fetch_inventory(
        self,
        partner_steam_id: str,
        app_id: int = TF2_APP_ID,
        context_id: int = TF2_CONTEXT_ID,
        tradable_only: bool = True
    ) -> List[InventoryItem]:
        client = self._require_client(GatewayErrorCode.INVENTORY_FAIL)
        game = GameOptions(str(app_id), str(context_id))

        try:
            raw_items = await self._call(
                client.get_partner_inventory,
                partner_steam_id,
                game,
                merge=True,
                count=INVENTORY_PAGE_COUNT
            )
        except Exception as e:
            raise GatewayError(
                f"Inventory lookup failed for {partner_steam_id}",
                GatewayErrorCode.INVENTORY_FAIL
            ) from e

        if not isinstance(raw_items, dict):
            raise GatewayError(
                f"Unexpected inventory payload for {partner_steam_id}",
                GatewayErrorCode.INVENTORY_FAIL
            )

        items = [
            InventoryItem.from_steam(asset_id, raw)
            for asset_id, raw in raw_items.items()
        ]
        if tradable_only:
            items = [item for item in items if item.tradable]

        logger.debug(
            f"[STEAM-GW] Inventory fetched | partner={partner_steam_id} | "
            f"app_id={app_id} | context_id={context_id} | items={len(items)}"
        )
        return items

    # ========================================================================
    # Offers
    # ========================================================================

    async def send_offer(self, draft: TradeOfferDraft) -> OfferSubmission:
        client = self._require_client(GatewayErrorCode.SEND_FAIL)
        game = GameOptions(str(TF2_APP_ID), str(TF2_CONTEXT_ID))
        their_assets = [Asset(item.asset_id, game) for item in draft.their_items]

        try:
            response = await self._call(
                client.make_offer_with_url,
                [],
                their_assets,
                draft.trade_url,
                draft.message
            )
        except Exception as e:
            raise GatewayError(
                f"Offer submission failed for {draft.partner_steam_id}",
                GatewayErrorCode.SEND_FAIL
            ) from e

        offer_id = (response or {}).get("tradeofferid")
        if not offer_id:
            raise GatewayError(
                f"Offer rejected by Steam: {(response or {}).get('strError', 'no offer id')}",
                GatewayErrorCode.SEND_FAIL
            )

        status = await self._submission_status(str(offer_id), draft.trade_url, response)
        return OfferSubmission(offer_id=str(offer_id), status=status)

    async def _submission_status(
        self,
        offer_id: str,
        trade_url: str,
        response: Dict[str, Any]
    ) -> OfferStatus:
        """
        Map a fresh offer to sent / pending.

        A new offer to a partner without a mobile authenticator still reads
        as Active with no escrow end date; the hold only shows up in the
        escrow duration Steam reports for the trade URL. The offer itself is
        still checked for an escrow end date or a pending confirmation.
        """
        if response.get("needs_email_confirmation"):
            return OfferStatus.PENDING

        escrow_days = await self._escrow_duration(trade_url)
        if escrow_days > 0:
            logger.info(
                f"[STEAM-GW] Offer held by escrow | offer_id={offer_id} | "
                f"escrow_days={escrow_days}"
            )
            return OfferStatus.PENDING

        try:
            offer = await self._fetch_offer(offer_id)
        except GatewayError as e:
            logger.warning(
                f"[STEAM-GW] Could not read new offer state, assuming sent | "
                f"offer_id={offer_id} | error={e}"
            )
            return OfferStatus.SENT

        if int(offer.get("escrow_end_date") or 0) > 0:
            return OfferStatus.PENDING
        if _offer_state(offer) in HELD_OFFER_STATES:
            return OfferStatus.PENDING
        return OfferStatus.SENT

    async def _escrow_duration(self, trade_url: str) -> int:
        """Days Steam would hold a trade with this partner, 0 if unknown."""
        client = self._require_client(GatewayErrorCode.SEND_FAIL)
        try:
            return int(await self._call(client.get_escrow_duration, trade_url))
        except Exception as e:
            logger.warning(
                f"[STEAM-GW] Escrow duration lookup failed | error={e}"
            )
            return 0

    async def get_offer_state(self, offer_id: str) -> OfferState:
        offer = await self._fetch_offer(offer_id)
        return _offer_state(offer)

    async def _fetch_offer(self, offer_id: str) -> Dict[str, Any]:
        client = self._require_client(GatewayErrorCode.STATE_FAIL)
        try:
            response = await self._call(client.get_trade_offer, offer_id, merge=False)
        except Exception as e:
            raise GatewayError(
                f"Offer lookup failed for {offer_id}",
                GatewayErrorCode.STATE_FAIL
            ) from e

        offer = ((response or {}).get("response") or {}).get("offer")
        if not offer:
            raise GatewayError(
                f"Offer {offer_id} not found",
                GatewayErrorCode.STATE_FAIL
            )
        return offer


def _offer_state(offer: Dict[str, Any]) -> OfferState:
    try:
        return OfferState(int(offer.get("trade_offer_state")))
    except (TypeError, ValueError) as e:
        raise GatewayError(
            f"Unknown offer state: {offer.get('trade_offer_state')}",
            GatewayErrorCode.STATE_FAIL
        ) from e
