"""
============================================================================
Project Appeal Desk v1.0.0
Discord Notifier - Appeal Lifecycle Notifications
============================================================================

Reliability Level: L5 High
Input Constraints: Valid Discord webhook URL required
Side Effects: Sends HTTP POST to Discord webhook endpoint

DELIVERY MANDATE:
- Fire-and-forget: messages are queued and posted by a daemon thread
- The Discord response is never inspected by callers
- No retries; a failed post is logged and dropped
- Zero impact on the HTTP response of the appeal endpoint

PAYLOAD:
    {"content": "<formatted text>"}

============================================================================
"""

import logging
import threading
from dataclasses import dataclass
from queue import Queue, Empty
from typing import Any, Dict, List, Optional

import requests

from app.observability.metrics import record_notification
from services.appeal_models import NotificationEvent, steam_profile_url

logger = logging.getLogger("discord_notifier")


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10

# Discord API limit
MAX_CONTENT_LENGTH = 2000

# Error codes
ERROR_DISCORD_WEBHOOK_MISSING = "DISC-001-WEBHOOK_MISSING"
ERROR_DISCORD_REQUEST_FAILED = "DISC-003-REQUEST_FAILED"
ERROR_DISCORD_TIMEOUT = "DISC-005-TIMEOUT"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class NotificationResult:
    """Result of a Discord notification attempt."""
    success: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None


# =============================================================================
# MESSAGE FORMATTING
# =============================================================================

def format_held_message(partner_steam_id: str, trade_url: str) -> str:
    return (
        "⚠️ Trade offer NOT sent due to 15-day hold.\n"
        "\n"
        f"👤 Steam Profile: {steam_profile_url(partner_steam_id)}\n"
        f"🔗 Trade URL: {trade_url}"
    )


def format_sent_message(
    partner_steam_id: str,
    trade_url: str,
    item_names: List[str]
) -> str:
    return (
        "🎯 New Trade Offer Sent\n"
        "\n"
        f"👤 Steam Profile: {steam_profile_url(partner_steam_id)}\n"
        f"🔗 Trade URL: {trade_url}\n"
        f"📦 Items Offered: {len(item_names)}\n"
        f"📝 Items: {', '.join(item_names)}"
    )


def format_accepted_message(partner_steam_id: str) -> str:
    return f"✅ Offer accepted by user: {steam_profile_url(partner_steam_id)}"


def format_declined_message(partner_steam_id: str) -> str:
    return f"❌ Offer declined by user: {steam_profile_url(partner_steam_id)}"


# =============================================================================
# DISCORD NOTIFIER CLASS
# =============================================================================

class DiscordNotifier:
    """
    Discord webhook client for appeal lifecycle events.

    Reliability Level: L5 High
    Input Constraints: Webhook URL (notifications disabled when missing)
    Side Effects: HTTP POST to Discord API

    USAGE:
        notifier = DiscordNotifier(webhook_url="https://discord.com/api/webhooks/...")
        notifier.notify_sent(partner, trade_url, ["Strange Scattergun"])
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        enabled: Optional[bool] = None,
        async_delivery: bool = True,
        session: Optional[requests.Session] = None
    ) -> None:
        """
        Initialize Discord Notifier.

        Args:
            webhook_url: Discord webhook URL
            enabled: Enable/disable notifications (default: True if URL set)
            async_delivery: Use background thread for non-blocking sends
            session: requests session (injected by tests)
        """
        self._webhook_url = webhook_url

        if enabled is not None:
            self._enabled = enabled
        else:
            self._enabled = self._webhook_url is not None

        self._session = session or requests.Session()

        self._async_delivery = async_delivery
        self._message_queue = Queue()  # type: Queue[Dict[str, Any]]
        self._worker_thread = None  # type: Optional[threading.Thread]
        self._shutdown_flag = threading.Event()

        if self._async_delivery and self._enabled:
            self._start_worker_thread()

        if self._enabled:
            logger.info(
                f"[DISCORD_NOTIFIER_INIT] enabled=True async={self._async_delivery}"
            )
        else:
            logger.info(
                "[DISCORD_NOTIFIER_INIT] enabled=False "
                "(webhook URL not configured or explicitly disabled)"
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def webhook_configured(self) -> bool:
        return self._webhook_url is not None

    def _start_worker_thread(self) -> None:
        self._worker_thread = threading.Thread(
            target=self._worker_loop,
            name="DiscordNotifierWorker",
            daemon=True
        )
        self._worker_thread.start()
        logger.debug("[DISCORD_WORKER] Background thread started")

    def _worker_loop(self) -> None:
        """
        Drain the message queue until shutdown.

        Side Effects: Sends HTTP requests
        """
        while not self._shutdown_flag.is_set() or not self._message_queue.empty():
            try:
                message = self._message_queue.get(timeout=1.0)
            except Empty:
                continue

            try:
                self._send_webhook_sync(message)
            except Exception as e:
                logger.error(
                    f"[DISCORD_WORKER_ERROR] Unexpected error: {str(e)}"
                )
            finally:
                self._message_queue.task_done()

    def _send_webhook_sync(self, payload: Dict[str, Any]) -> NotificationResult:
        """
        Post a payload to the webhook.

        Transport failures are logged and reported in the result, never raised.
        """
        if not self._webhook_url:
            return NotificationResult(
                success=False,
                error_code=ERROR_DISCORD_WEBHOOK_MISSING,
                error_message="Webhook URL not configured"
            )

        try:
            response = self._session.post(
                self._webhook_url,
                json=payload,
                timeout=DEFAULT_REQUEST_TIMEOUT_SECONDS
            )
            logger.debug(
                f"[DISCORD_SEND] Message posted | status={response.status_code}"
            )
            return NotificationResult(success=True)

        except requests.Timeout:
            logger.error(
                f"[{ERROR_DISCORD_TIMEOUT}] Request timed out after "
                f"{DEFAULT_REQUEST_TIMEOUT_SECONDS}s"
            )
            return NotificationResult(
                success=False,
                error_code=ERROR_DISCORD_TIMEOUT,
                error_message="Request timed out"
            )

        except requests.RequestException as e:
            logger.error(
                f"[{ERROR_DISCORD_REQUEST_FAILED}] Request error: {str(e)}"
            )
            return NotificationResult(
                success=False,
                error_code=ERROR_DISCORD_REQUEST_FAILED,
                error_message=str(e)
            )

    def send_content(
        self,
        content: str,
        event: Optional[NotificationEvent] = None,
        blocking: bool = False
    ) -> NotificationResult:
        """
        Send a plain-text Discord message.

        Args:
            content: Message text (truncated to 2000 chars)
            event: Lifecycle milestone, used for metrics and logs
            blocking: If True, post in the calling thread

        Returns:
            NotificationResult (immediate if async, actual if blocking)
        """
        if not self._enabled:
            return NotificationResult(
                success=False,
                error_code=ERROR_DISCORD_WEBHOOK_MISSING,
                error_message="Discord notifications disabled"
            )

        payload = {"content": content[:MAX_CONTENT_LENGTH]}

        if event is not None:
            record_notification(event.value)
            logger.info(f"[DISCORD_NOTIFY] event={event.value}")

        if blocking or not self._async_delivery:
            return self._send_webhook_sync(payload)

        self._message_queue.put(payload)
        return NotificationResult(success=True, error_message="Queued for async delivery")

    def notify_held(self, partner_steam_id: str, trade_url: str) -> NotificationResult:
        return self.send_content(
            format_held_message(partner_steam_id, trade_url),
            event=NotificationEvent.HELD
        )

    def notify_sent(
        self,
        partner_steam_id: str,
        trade_url: str,
        item_names: List[str]
    ) -> NotificationResult:
        return self.send_content(
            format_sent_message(partner_steam_id, trade_url, item_names),
            event=NotificationEvent.SENT
        )

    def notify_accepted(self, partner_steam_id: str) -> NotificationResult:
        return self.send_content(
            format_accepted_message(partner_steam_id),
            event=NotificationEvent.ACCEPTED
        )

    def notify_declined(self, partner_steam_id: str) -> NotificationResult:
        return self.send_content(
            format_declined_message(partner_steam_id),
            event=NotificationEvent.DECLINED
        )

    def shutdown(self) -> None:
        """
        Drain pending messages and stop the worker thread.

        Side Effects: Stops worker thread, closes HTTP session
        """
        if self._async_delivery and self._worker_thread:
            logger.info("[DISCORD_NOTIFIER] Shutting down...")
            self._shutdown_flag.set()
            self._worker_thread.join(timeout=DEFAULT_REQUEST_TIMEOUT_SECONDS + 2.0)
            self._worker_thread = None
            logger.info("[DISCORD_NOTIFIER] Shutdown complete")

        self._session.close()


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_discord_notifier = None  # type: Optional[DiscordNotifier]


def initialize_discord_notifier(
    webhook_url: Optional[str] = None,
    enabled: Optional[bool] = None,
    async_delivery: bool = True
) -> DiscordNotifier:
    """
    Replace the global DiscordNotifier with a configured instance.

    Side Effects: Shuts down any previous instance
    """
    global _discord_notifier

    if _discord_notifier is not None:
        _discord_notifier.shutdown()

    _discord_notifier = DiscordNotifier(
        webhook_url=webhook_url,
        enabled=enabled,
        async_delivery=async_delivery
    )

    return _discord_notifier
