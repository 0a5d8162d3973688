"""
============================================================================
Project Appeal Desk v1.0.0
Session Renewal Worker
============================================================================

Reliability Level: L6 Critical

Keeps the shared trading session usable outside any request:
- Every interval, asks the gateway whether the web session is alive
- Logs in again when it is not
- Failures are logged and retried on the next tick only

============================================================================
"""

from typing import Optional
import asyncio
import logging

from app.exchange.session_gateway import GatewayError, SessionGateway
from app.observability.metrics import record_session_renewal

logger = logging.getLogger(__name__)


class SessionRenewalWorker:
    """Background job renewing the gateway session when it expires."""

    def __init__(self, gateway: SessionGateway, interval_seconds: int = 10) -> None:
        if interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be positive, got: {interval_seconds}"
            )

        self._gateway = gateway
        self._interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            f"[SESSION-RENEWAL] Started | interval_seconds={self._interval_seconds}"
        )

    async def stop(self) -> None:
        if not self._running:
            return

        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("[SESSION-RENEWAL] Stopped")

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
            except asyncio.CancelledError:
                break

            try:
                await self.check_once()
            except Exception as e:
                logger.error(f"[SESSION-RENEWAL] Error in main loop | error={str(e)}")

    async def check_once(self) -> bool:
        """
        Renew the session if it is dead.

        Returns:
            True if a renewal happened and succeeded
        """
        if await self._gateway.is_session_alive():
            return False

        logger.warning("[SESSION-RENEWAL] Session expired, logging in again")

        try:
            await self._gateway.renew_session()
        except GatewayError as e:
            record_session_renewal("failed")
            logger.error(f"[{e.error_code}] Session renewal failed | error={e.message}")
            return False

        record_session_renewal("renewed")
        return True
