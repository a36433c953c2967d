"""Order history API endpoints."""
import logging
from typing import List
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_order_history_service, require
from app.services.access.gate import Capability
from app.services.identity.models import AccountSnapshot
from app.services.ordering.history import OrderHistoryService, OrderView

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/orders", response_model=List[OrderView])
async def get_order_history(
    limit: int = Query(100, ge=1, le=500),
    account: AccountSnapshot = Depends(require(Capability.VIEW_OWN_ORDERS)),
    history: OrderHistoryService = Depends(get_order_history_service),
):
    """Get the signed-in account's orders, newest first."""
    logger.info(f"[ORDERS HISTORY] Request received - Account: {account.id}, limit: {limit}")
    orders = await history.list_orders(account.id, limit=limit)
    logger.info(f"[ORDERS HISTORY] Found {len(orders)} orders - Account: {account.id}")
    return orders
