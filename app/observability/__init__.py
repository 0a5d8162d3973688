"""
============================================================================
Project Appeal Desk v1.0.0
Observability Module - Prometheus Metrics and Discord Notifications
============================================================================

Reliability Level: L5 High
Input Constraints: None
Side Effects: Exposes Prometheus metrics, posts to Discord

============================================================================
"""

from app.observability.metrics import (
    APPEALS_RECEIVED,
    ITEMS_REQUESTED,
    NOTIFICATIONS_SENT,
    OFFER_RESOLUTIONS,
    SESSION_RENEWALS,
    record_appeal_outcome,
    record_items_requested,
    record_notification,
    record_offer_resolution,
    record_session_renewal,
)

from app.observability.discord_notifier import (
    DiscordNotifier,
    NotificationResult,
    initialize_discord_notifier,
)

__all__ = [
    # Core metrics
    "APPEALS_RECEIVED",
    "ITEMS_REQUESTED",
    "NOTIFICATIONS_SENT",
    "OFFER_RESOLUTIONS",
    "SESSION_RENEWALS",
    "record_appeal_outcome",
    "record_items_requested",
    "record_notification",
    "record_offer_resolution",
    "record_session_renewal",
    # Discord
    "DiscordNotifier",
    "NotificationResult",
    "initialize_discord_notifier",
]
