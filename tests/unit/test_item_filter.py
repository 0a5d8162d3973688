"""
============================================================================
Unit Tests - Item Eligibility Filter
============================================================================

Tests the eligibility predicate:
- Each qualifying tag makes an item eligible
- "Paint" anywhere in the name makes an item eligible
- Matching is exact and case-sensitive
- filter_eligible_items keeps inventory order

============================================================================
"""

import pytest

from app.logic.item_filter import (
    ELIGIBLE_TAG_NAMES,
    PAINT_NAME_MARKER,
    filter_eligible_items,
    is_eligible_item,
)


class TestIsEligibleItem:
    """Tag and name rules of the predicate."""

    @pytest.mark.parametrize("tag", ["Unusual", "Strange", "Tool", "Taunt", "Festivized"])
    def test_qualifying_tag_is_eligible(self, tag: str, make_item) -> None:
        assert is_eligible_item(make_item("Plain Hat", tag))

    def test_qualifying_tag_among_others(self, make_item) -> None:
        item = make_item("Plain Hat", "Cosmetic", "Hat", "Taunt")
        assert is_eligible_item(item)

    def test_paint_in_name_without_tags(self, make_item) -> None:
        assert is_eligible_item(make_item("A Distinctive Lack of Hue Paint"))

    def test_paint_substring_mid_name(self, make_item) -> None:
        assert is_eligible_item(make_item("Killstreak Paintrain"))

    def test_decorated_weapon_is_not_eligible(self, make_item) -> None:
        assert not is_eligible_item(make_item("Decorated Weapon", "Decorated"))

    def test_lowercase_tag_is_not_eligible(self, make_item) -> None:
        assert not is_eligible_item(make_item("Plain Hat", "unusual"))

    def test_lowercase_paint_is_not_eligible(self, make_item) -> None:
        assert not is_eligible_item(make_item("Paintless hat".lower()))

    def test_tag_substring_is_not_eligible(self, make_item) -> None:
        assert not is_eligible_item(make_item("Plain Hat", "Strangeness"))

    def test_no_tags_no_paint(self, make_item) -> None:
        assert not is_eligible_item(make_item("Mann Co. Supply Crate Key"))

    def test_rule_constants(self) -> None:
        assert ELIGIBLE_TAG_NAMES == {"Unusual", "Strange", "Tool", "Taunt", "Festivized"}
        assert PAINT_NAME_MARKER == "Paint"


class TestFilterEligibleItems:

    def test_keeps_order_and_drops_ineligible(self, eligible_inventory) -> None:
        result = filter_eligible_items(eligible_inventory)

        assert [item.name for item in result] == [
            "Strange Scattergun",
            "Team Spirit Paint Can",
            "Burning Flames Team Captain",
        ]

    def test_empty_inventory(self) -> None:
        assert filter_eligible_items([]) == []
