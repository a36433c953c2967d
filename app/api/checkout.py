"""Checkout API endpoints."""
import logging
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.dependencies import (
    get_browsing_session,
    get_order_submission_service,
    require,
)
from app.services.access.gate import Capability
from app.services.identity.models import AccountSnapshot
from app.services.identity.session import BrowsingSession
from app.services.ordering.models import CheckoutPreview, DeliveryMode
from app.services.ordering.submission import OrderSubmissionService

router = APIRouter()
logger = logging.getLogger(__name__)


class CheckoutRequest(BaseModel):
    """Checkout request model."""
    delivery_mode: DeliveryMode = DeliveryMode.IN_VENUE
    delivery_address: Optional[str] = None
    expected_total: Optional[Decimal] = None


class CheckoutResponse(BaseModel):
    """Checkout response model."""
    order_id: int
    message: str = "Order placed"


@router.get("/api/checkout/preview", response_model=CheckoutPreview)
async def preview_checkout(
    delivery_mode: DeliveryMode = DeliveryMode.IN_VENUE,
    account: AccountSnapshot = Depends(require(Capability.CHECKOUT)),
    session: BrowsingSession = Depends(get_browsing_session),
    submission: OrderSubmissionService = Depends(get_order_submission_service),
):
    """Get the totals the order would be placed with."""
    return submission.preview(session.cart, delivery_mode)


@router.post("/api/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    checkout_req: CheckoutRequest,
    account: AccountSnapshot = Depends(require(Capability.CHECKOUT)),
    session: BrowsingSession = Depends(get_browsing_session),
    submission: OrderSubmissionService = Depends(get_order_submission_service),
):
    """Place an order for the cart's contents."""
    order_id = await submission.submit(
        session.cart,
        account,
        checkout_req.delivery_mode,
        delivery_address=checkout_req.delivery_address,
        expected_total=checkout_req.expected_total,
    )
    # Payment capture is not integrated; orders stay pending until staff act on them
    return CheckoutResponse(order_id=order_id)
