"""
============================================================================
Project Appeal Desk v1.0.0
Appeal Schema - Pydantic Models for the Appeal Endpoint
============================================================================

Reliability Level: L5 High
Input Constraints: JSON object body
Side Effects: None (pure validation)

The trade URL is optional at the schema level so that a missing value is
reported with the same 400 "Invalid trade URL" answer as an insecure one.

============================================================================
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppealIn(BaseModel):
    """Incoming appeal request body."""

    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = Field(
        None,
        description="Free text shown to the partner as the offer message"
    )
    trade_url: Optional[str] = Field(
        None,
        alias="tradeUrl",
        description="Partner trade URL (https:// only)"
    )


class AppealOut(BaseModel):
    """Successful appeal response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    items_count: int = Field(..., alias="itemsCount", ge=1)


class AppealErrorOut(BaseModel):
    """Failed appeal response; message is always a static string."""

    success: bool = False
    message: str
