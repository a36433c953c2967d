"""Order history for a customer."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel

from app.services.persistence.orders import OrderPersistenceService


class OrderLineView(BaseModel):
    """Order line with the item name it was placed for."""

    id: int
    item_id: int
    item_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderView(BaseModel):
    """Order header with its lines."""

    id: int
    status: str
    delivery_mode: str
    delivery_fee: Decimal
    delivery_address: Optional[str] = None
    total_amount: Decimal
    created_at: Optional[datetime] = None
    lines: List[OrderLineView] = []


class OrderHistoryService:
    """Service for reading an account's past orders."""

    def __init__(self, orders: OrderPersistenceService):
        self.orders = orders

    async def list_orders(self, account_id: int, limit: int = 100) -> List[OrderView]:
        """Get an account's orders, newest first."""
        orders = await self.orders.list_orders_for_account(account_id, limit=limit)
        return [
            OrderView(
                id=order.id,
                status=order.status,
                delivery_mode=order.delivery_mode,
                delivery_fee=order.delivery_fee,
                delivery_address=order.delivery_address,
                total_amount=order.total_amount,
                created_at=order.created_at,
                lines=[
                    OrderLineView(
                        id=line.id,
                        item_id=line.item_id,
                        item_name=line.item.name if line.item else None,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        line_total=line.unit_price * line.quantity,
                    )
                    for line in order.lines
                ],
            )
            for order in orders
        ]
