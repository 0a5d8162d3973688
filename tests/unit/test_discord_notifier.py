"""
Unit Tests for the Discord Notifier

Tests the notifier without touching Discord:
- Message texts for each lifecycle event
- {"content": ...} payload posted to the webhook
- Transport failures are reported, never raised
- Disabled notifier sends nothing
- Re-initialization replaces the process notifier
"""

from unittest.mock import Mock

import pytest
import requests

from app.observability import discord_notifier
from app.observability.discord_notifier import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ERROR_DISCORD_REQUEST_FAILED,
    ERROR_DISCORD_TIMEOUT,
    ERROR_DISCORD_WEBHOOK_MISSING,
    MAX_CONTENT_LENGTH,
    DiscordNotifier,
    format_accepted_message,
    format_declined_message,
    format_held_message,
    format_sent_message,
    initialize_discord_notifier,
)


WEBHOOK_URL = "https://discord.com/api/webhooks/1/abc"
PARTNER = "76561197960389184"
TRADE_URL = "https://steamcommunity.com/tradeoffer/new/?partner=123456&token=AbCdEf"
PROFILE_URL = f"https://steamcommunity.com/profiles/{PARTNER}"


@pytest.fixture
def mock_session() -> Mock:
    session = Mock(spec=requests.Session)
    session.post.return_value = Mock(status_code=204)
    return session


@pytest.fixture
def notifier(mock_session) -> DiscordNotifier:
    """Synchronous notifier so posts happen before assertions."""
    return DiscordNotifier(
        webhook_url=WEBHOOK_URL,
        async_delivery=False,
        session=mock_session,
    )


# =============================================================================
# Message Formatting
# =============================================================================

class TestMessageFormatting:

    def test_held_message(self) -> None:
        message = format_held_message(PARTNER, TRADE_URL)

        assert message.startswith("⚠️ Trade offer NOT sent due to 15-day hold.")
        assert f"👤 Steam Profile: {PROFILE_URL}" in message
        assert f"🔗 Trade URL: {TRADE_URL}" in message

    def test_sent_message_lists_items(self) -> None:
        message = format_sent_message(
            PARTNER, TRADE_URL, ["Strange Scattergun", "Team Spirit Paint Can"]
        )

        assert message.startswith("🎯 New Trade Offer Sent")
        assert "📦 Items Offered: 2" in message
        assert "📝 Items: Strange Scattergun, Team Spirit Paint Can" in message
        assert PROFILE_URL in message

    def test_accepted_message(self) -> None:
        assert format_accepted_message(PARTNER) == f"✅ Offer accepted by user: {PROFILE_URL}"

    def test_declined_message(self) -> None:
        assert format_declined_message(PARTNER) == f"❌ Offer declined by user: {PROFILE_URL}"


# =============================================================================
# Delivery
# =============================================================================

class TestDelivery:

    def test_posts_content_payload(self, notifier, mock_session) -> None:
        result = notifier.notify_accepted(PARTNER)

        assert result.success
        mock_session.post.assert_called_once_with(
            WEBHOOK_URL,
            json={"content": format_accepted_message(PARTNER)},
            timeout=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        )

    def test_each_event_posts_once(self, notifier, mock_session) -> None:
        notifier.notify_held(PARTNER, TRADE_URL)
        notifier.notify_sent(PARTNER, TRADE_URL, ["Strange Scattergun"])
        notifier.notify_declined(PARTNER)

        assert mock_session.post.call_count == 3

    def test_content_truncated(self, notifier, mock_session) -> None:
        notifier.send_content("x" * (MAX_CONTENT_LENGTH + 500))

        payload = mock_session.post.call_args.kwargs["json"]
        assert len(payload["content"]) == MAX_CONTENT_LENGTH

    def test_request_error_is_reported(self, notifier, mock_session) -> None:
        mock_session.post.side_effect = requests.ConnectionError("refused")

        result = notifier.notify_sent(PARTNER, TRADE_URL, ["Strange Scattergun"])

        assert not result.success
        assert result.error_code == ERROR_DISCORD_REQUEST_FAILED

    def test_timeout_is_reported(self, notifier, mock_session) -> None:
        mock_session.post.side_effect = requests.Timeout()

        result = notifier.notify_held(PARTNER, TRADE_URL)

        assert not result.success
        assert result.error_code == ERROR_DISCORD_TIMEOUT

    def test_error_status_is_not_inspected(self, notifier, mock_session) -> None:
        mock_session.post.return_value = Mock(status_code=500)

        assert notifier.notify_declined(PARTNER).success


class TestDisabled:

    def test_no_webhook_disables(self, mock_session) -> None:
        notifier = DiscordNotifier(webhook_url=None, async_delivery=False, session=mock_session)

        result = notifier.notify_accepted(PARTNER)

        assert not notifier.is_enabled
        assert not result.success
        assert result.error_code == ERROR_DISCORD_WEBHOOK_MISSING
        mock_session.post.assert_not_called()

    def test_explicitly_disabled(self, mock_session) -> None:
        notifier = DiscordNotifier(
            webhook_url=WEBHOOK_URL,
            enabled=False,
            async_delivery=False,
            session=mock_session,
        )

        notifier.notify_accepted(PARTNER)

        assert notifier.webhook_configured
        mock_session.post.assert_not_called()


class TestAsyncDelivery:

    def test_queued_message_is_posted_before_shutdown_returns(self, mock_session) -> None:
        notifier = DiscordNotifier(webhook_url=WEBHOOK_URL, session=mock_session)

        result = notifier.notify_accepted(PARTNER)
        notifier.shutdown()

        assert result.success
        mock_session.post.assert_called_once()
        mock_session.close.assert_called_once()


class TestInitialization:

    def test_initialize_replaces_and_shuts_down_previous(self, monkeypatch) -> None:
        previous = Mock(spec=DiscordNotifier)
        monkeypatch.setattr(discord_notifier, "_discord_notifier", previous)

        notifier = initialize_discord_notifier(webhook_url=None, async_delivery=False)

        previous.shutdown.assert_called_once()
        assert discord_notifier._discord_notifier is notifier
        assert not notifier.is_enabled
