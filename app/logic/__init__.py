"""
============================================================================
Project Appeal Desk v1.0.0
Logic Layer - Item Eligibility
============================================================================

Pure rules applied to a partner inventory before an offer is built.

============================================================================
"""

from app.logic.item_filter import (
    ELIGIBLE_TAG_NAMES,
    PAINT_NAME_MARKER,
    filter_eligible_items,
    is_eligible_item,
)

__all__ = [
    "ELIGIBLE_TAG_NAMES",
    "PAINT_NAME_MARKER",
    "filter_eligible_items",
    "is_eligible_item",
]
