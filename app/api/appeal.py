"""
============================================================================
Project Appeal Desk v1.0.0
Appeal API - Trade Appeal Intake (Hot Path)
============================================================================

Reliability Level: L6 Critical
Input Constraints:
    - JSON body {description?: string, tradeUrl: string}
    - tradeUrl must use https://
Side Effects:
    - Sends one trade offer on success
    - Queues Discord notifications
    - Registers the offer for accepted / declined notifications

RESPONSES:
    400 Invalid trade URL
    500 Inventory fetch failed
    400 No tradable items matched.
    500 Offer failed to send
    400 Trade would be held for 15 days. Offer not sent.
    200 {success: true, itemsCount}

Failure messages are static; causes are logged only.

============================================================================
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaValidationError

from app.observability.metrics import record_appeal_outcome, record_items_requested
from app.schemas.appeal import AppealErrorOut, AppealIn, AppealOut
from services.appeal_intake import AppealIntakeService
from services.appeal_models import AppealError, ValidationError

logger = logging.getLogger(__name__)


# ============================================================================
# ROUTER
# ============================================================================

router = APIRouter()


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_appeal_service(request: Request) -> AppealIntakeService:
    """
    Process-wide AppealIntakeService created in the application lifespan.

    Raises:
        HTTPException: 503 if the trading session is not initialized
    """
    service = getattr(request.app.state, "appeal_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Trading session not initialized")
    return service


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def create_error_response(error: AppealError) -> JSONResponse:
    """Static {success: false, message} body for an appeal failure."""
    record_appeal_outcome(error.error_code)
    return JSONResponse(
        status_code=error.status_code,
        content=AppealErrorOut(message=error.message).model_dump()
    )


def parse_appeal_body(raw_body: bytes) -> AppealIn:
    """
    Parse the raw body into an AppealIn.

    Anything that is not a JSON object with string fields is reported as an
    invalid trade URL.

    Raises:
        ValidationError: APL-001
    """
    try:
        payload = json.loads(raw_body.decode("utf-8")) if raw_body else {}
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError() from e

    if not isinstance(payload, dict):
        raise ValidationError()

    try:
        return AppealIn(**payload)
    except SchemaValidationError as e:
        raise ValidationError() from e


# ============================================================================
# APPEAL ENDPOINT
# ============================================================================

@router.post(
    "/submit-appeal",
    summary="Submit Trade Appeal",
    description=(
        "Inspects the partner's TF2 inventory, requests every eligible item "
        "in a single trade offer, and reports the outcome to Discord."
    ),
    response_model=AppealOut,
    responses={
        400: {"model": AppealErrorOut, "description": "Invalid URL, no eligible items, or escrow hold"},
        500: {"model": AppealErrorOut, "description": "Inventory fetch or offer send failed"},
        503: {"description": "Trading session not initialized"},
    }
)
async def submit_appeal(
    request: Request,
    service: AppealIntakeService = Depends(get_appeal_service)
):
    """
    Receive and process a trade appeal.

    Steps run strictly in order; the response is returned before the
    partner accepts or declines the offer.
    """
    raw_body = await request.body()

    try:
        appeal = parse_appeal_body(raw_body)
        result = await service.submit_appeal(
            trade_url=appeal.trade_url,
            description=appeal.description
        )
    except AppealError as e:
        return create_error_response(e)

    record_appeal_outcome("sent")
    record_items_requested(result.items_count)

    return JSONResponse(
        status_code=200,
        content=AppealOut(items_count=result.items_count).model_dump(by_alias=True)
    )
