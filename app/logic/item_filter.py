"""
============================================================================
Project Appeal Desk v1.0.0
Item Eligibility Filter
============================================================================

Reliability Level: L5 High
Input Constraints: InventoryItem with name and ordered tags
Side Effects: None (pure predicate)

RULE:
    An item is eligible when one of its tag names is exactly
    Unusual, Strange, Tool, Taunt or Festivized, or when its display
    name contains "Paint". Both checks are case-sensitive.

============================================================================
"""

from typing import Iterable, List

from services.appeal_models import InventoryItem


ELIGIBLE_TAG_NAMES = frozenset({
    "Unusual",
    "Strange",
    "Tool",
    "Taunt",
    "Festivized",
})

PAINT_NAME_MARKER = "Paint"


def is_eligible_item(item: InventoryItem) -> bool:
    """
    Decide whether an item belongs in an appeal offer.

    Tag comparison is exact; "unusual" does not match "Unusual".
    """
    if any(tag.name in ELIGIBLE_TAG_NAMES for tag in item.tags):
        return True
    return PAINT_NAME_MARKER in item.name


def filter_eligible_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Keep eligible items in inventory order."""
    return [item for item in items if is_eligible_item(item)]
