"""
Unit Tests - Appeal Domain Models

Covers inventory parsing from Steam payloads, the offer draft lifecycle,
and the static error messages returned to callers.
"""

import pytest

from services.appeal_models import (
    DEFAULT_OFFER_MESSAGE,
    TERMINAL_OFFER_STATES,
    HoldPolicyError,
    InventoryItem,
    NoEligibleItemsError,
    OfferAlreadySubmittedError,
    OfferState,
    OfferStatus,
    OfferSubmission,
    SubmissionError,
    TradeOfferDraft,
    UpstreamError,
    ValidationError,
    steam_profile_url,
)


VALID_TRADE_URL = "https://steamcommunity.com/tradeoffer/new/?partner=123456&token=AbCdEf"
VALID_PARTNER_STEAM_ID = "76561197960389184"


class TestInventoryItemFromSteam:

    def test_localized_tag_names(self) -> None:
        raw = {
            "id": "1111",
            "name": "Strange Scattergun",
            "market_hash_name": "Strange Scattergun",
            "tradable": 1,
            "tags": [
                {"category": "Quality", "internal_name": "strange", "localized_tag_name": "Strange"},
                {"category": "Type", "internal_name": "primary", "localized_tag_name": "Primary weapon"},
            ],
        }

        item = InventoryItem.from_steam("1111", raw)

        assert item.asset_id == "1111"
        assert item.name == "Strange Scattergun"
        assert item.tag_names == ["Strange", "Primary weapon"]
        assert item.tradable

    def test_legacy_tag_names(self) -> None:
        raw = {"name": "Taunt: The Conga", "tags": [{"name": "Taunt"}]}

        item = InventoryItem.from_steam("2222", raw)

        assert item.asset_id == "2222"
        assert item.tag_names == ["Taunt"]

    def test_market_hash_name_fallback(self) -> None:
        item = InventoryItem.from_steam("3", {"market_hash_name": "Mann Co. Supply Crate Key"})

        assert item.name == "Mann Co. Supply Crate Key"
        assert item.tags == ()

    def test_untradable(self) -> None:
        assert not InventoryItem.from_steam("4", {"name": "Hat", "tradable": 0}).tradable


class TestTradeOfferDraft:

    def test_defaults(self) -> None:
        draft = TradeOfferDraft(trade_url=VALID_TRADE_URL, partner_steam_id=VALID_PARTNER_STEAM_ID)

        assert draft.their_items == []
        assert draft.message == DEFAULT_OFFER_MESSAGE
        assert not draft.is_submitted

    def test_accumulates_items(self, make_item) -> None:
        draft = TradeOfferDraft(trade_url=VALID_TRADE_URL, partner_steam_id=VALID_PARTNER_STEAM_ID)

        draft.add_their_item(make_item("Strange Scattergun", "Strange"))
        draft.add_their_item(make_item("Team Spirit Paint Can", "Tool"))

        assert draft.item_names == ["Strange Scattergun", "Team Spirit Paint Can"]

    @pytest.mark.parametrize("message", [None, ""])
    def test_empty_message_uses_default(self, message) -> None:
        draft = TradeOfferDraft(trade_url=VALID_TRADE_URL, partner_steam_id=VALID_PARTNER_STEAM_ID)

        draft.set_message(message)

        assert draft.message == DEFAULT_OFFER_MESSAGE

    def test_submitted_draft_is_frozen(self, make_item) -> None:
        draft = TradeOfferDraft(trade_url=VALID_TRADE_URL, partner_steam_id=VALID_PARTNER_STEAM_ID)
        draft.add_their_item(make_item("Strange Scattergun", "Strange"))
        draft.mark_submitted()

        with pytest.raises(OfferAlreadySubmittedError):
            draft.add_their_item(make_item("Team Spirit Paint Can", "Tool"))
        with pytest.raises(OfferAlreadySubmittedError):
            draft.set_message("late")
        with pytest.raises(OfferAlreadySubmittedError):
            draft.mark_submitted()

        assert draft.item_names == ["Strange Scattergun"]


class TestOfferSubmission:

    def test_pending_is_held(self) -> None:
        assert OfferSubmission(offer_id="1", status=OfferStatus.PENDING).is_held
        assert not OfferSubmission(offer_id="1", status=OfferStatus.SENT).is_held


class TestOfferStates:

    def test_open_states_are_not_terminal(self) -> None:
        assert OfferState.ACTIVE not in TERMINAL_OFFER_STATES
        assert OfferState.CREATED_NEEDS_CONFIRMATION not in TERMINAL_OFFER_STATES
        assert OfferState.IN_ESCROW not in TERMINAL_OFFER_STATES

    def test_resolutions_are_terminal(self) -> None:
        assert OfferState.ACCEPTED in TERMINAL_OFFER_STATES
        assert OfferState.DECLINED in TERMINAL_OFFER_STATES


class TestErrors:

    @pytest.mark.parametrize("error_cls, status_code, message", [
        (ValidationError, 400, "Invalid trade URL"),
        (UpstreamError, 500, "Inventory fetch failed"),
        (NoEligibleItemsError, 400, "No tradable items matched."),
        (SubmissionError, 500, "Offer failed to send"),
        (HoldPolicyError, 400, "Trade would be held for 15 days. Offer not sent."),
    ])
    def test_static_messages(self, error_cls, status_code, message) -> None:
        error = error_cls()

        assert error.status_code == status_code
        assert error.message == message
        assert error.error_code in str(error)


def test_steam_profile_url() -> None:
    assert steam_profile_url("76561197960389184") == (
        "https://steamcommunity.com/profiles/76561197960389184"
    )
