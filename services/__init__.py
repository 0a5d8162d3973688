"""
============================================================================
Project Appeal Desk - Services Layer
============================================================================

Appeal intake pipeline: domain models, bot configuration, the intake
service and the background workers that outlive a request.

Reliability Level: L6 Critical
============================================================================
"""

from services.appeal_models import (
    AppealError,
    AppealErrorCode,
    HoldPolicyError,
    InventoryItem,
    ItemTag,
    NoEligibleItemsError,
    OfferState,
    OfferStatus,
    OfferSubmission,
    SubmissionError,
    TradeOfferDraft,
    UpstreamError,
    ValidationError,
)

from services.bot_config import (
    BotConfig,
    BotConfigurationError,
)

__all__ = [
    # Appeal Models
    "AppealError",
    "AppealErrorCode",
    "HoldPolicyError",
    "InventoryItem",
    "ItemTag",
    "NoEligibleItemsError",
    "OfferState",
    "OfferStatus",
    "OfferSubmission",
    "SubmissionError",
    "TradeOfferDraft",
    "UpstreamError",
    "ValidationError",
    # Bot Config
    "BotConfig",
    "BotConfigurationError",
]
