"""
============================================================================
Project Appeal Desk v1.0.0
Prometheus Metrics
============================================================================

Reliability Level: L5 High
Input Constraints: None
Side Effects: Updates Prometheus metrics registry

METRICS EXPOSED
---------------
- appeals_received_total: Appeals by final outcome
- appeal_items_requested: Distribution of eligible item counts per offer
- appeal_notifications_total: Discord notifications by lifecycle event
- appeal_offer_resolutions_total: Watched offers by terminal state
- appeal_session_renewals_total: Session renewals by result

============================================================================
"""

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ============================================================================
# PROMETHEUS METRICS DEFINITIONS
# ============================================================================

APPEALS_RECEIVED = Counter(
    "appeals_received_total",
    "Total number of appeals handled, by outcome",
    ["outcome"]
)

ITEMS_REQUESTED = Histogram(
    "appeal_items_requested",
    "Number of eligible items requested per submitted offer",
    buckets=[1, 2, 5, 10, 25, 50, 100, 250]
)

NOTIFICATIONS_SENT = Counter(
    "appeal_notifications_total",
    "Total number of Discord notifications queued, by event",
    ["event"]
)

OFFER_RESOLUTIONS = Counter(
    "appeal_offer_resolutions_total",
    "Total number of watched offers that reached a terminal state",
    ["state"]
)

SESSION_RENEWALS = Counter(
    "appeal_session_renewals_total",
    "Total number of trading session renewals, by result",
    ["result"]
)


# ============================================================================
# METRIC UPDATE FUNCTIONS
# ============================================================================

def record_appeal_outcome(outcome: str) -> None:
    """
    Record the final outcome of an appeal.

    Args:
        outcome: "sent" or the error code of the failure (e.g. APL-003)
    """
    APPEALS_RECEIVED.labels(outcome=outcome).inc()


def record_items_requested(count: int) -> None:
    ITEMS_REQUESTED.observe(count)


def record_notification(event: str) -> None:
    NOTIFICATIONS_SENT.labels(event=event).inc()


def record_offer_resolution(state: str) -> None:
    OFFER_RESOLUTIONS.labels(state=state).inc()


def record_session_renewal(result: str) -> None:
    SESSION_RENEWALS.labels(result=result).inc()
