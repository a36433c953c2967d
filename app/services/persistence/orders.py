"""Order persistence service."""
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import desc, func, select
from sqlalchemy.orm import selectinload

from app.db.models import Order, OrderLine
from app.services.persistence.store import StoreService, store_operation


class OrderPersistenceService(StoreService):
    """Service for persisting order data."""

    @store_operation
    async def create_order(
        self,
        account_id: int,
        total_amount: Decimal,
        delivery_mode: str,
        delivery_fee: Decimal,
        delivery_address: Optional[str] = None,
    ) -> Order:
        """Create a new order header."""
        order = Order(
            account_id=account_id,
            total_amount=total_amount,
            delivery_mode=delivery_mode,
            delivery_fee=delivery_fee,
            delivery_address=delivery_address,
            status="pending",
        )
        self.db.add(order)
        await self.db.flush()
        await self.db.commit()
        # No store round trips after the commit; the id is known from the flush
        return order

    @store_operation
    async def add_order_lines(
        self, order_id: int, lines: List[Dict[str, Any]]
    ) -> List[OrderLine]:
        """Add lines to an order in a single commit."""
        order_lines = []
        for line_data in lines:
            order_line = OrderLine(
                order_id=order_id,
                item_id=line_data["item_id"],
                quantity=line_data["quantity"],
                unit_price=line_data["unit_price"],
            )
            order_lines.append(order_line)
            self.db.add(order_line)

        await self.db.flush()
        await self.db.commit()
        return order_lines

    @store_operation
    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with lines."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.lines).selectinload(OrderLine.item))
        )
        return result.scalar_one_or_none()

    @store_operation
    async def list_orders_for_account(self, account_id: int, limit: int = 100) -> List[Order]:
        """Get an account's orders, newest first, with lines and their items."""
        result = await self.db.execute(
            select(Order)
            .where(Order.account_id == account_id)
            .options(selectinload(Order.lines).selectinload(OrderLine.item))
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(limit)
        )
        return list(result.scalars().all())

    @store_operation
    async def count_orders_by_status(self) -> Dict[str, int]:
        """Count orders grouped by status."""
        result = await self.db.execute(
            select(Order.status, func.count(Order.id)).group_by(Order.status)
        )
        return {status: count for status, count in result.all()}

    @store_operation
    async def list_orders_without_lines(self) -> List[int]:
        """IDs of order headers that have no lines (left by a partial submission)."""
        result = await self.db.execute(
            select(Order.id)
            .outerjoin(OrderLine, OrderLine.order_id == Order.id)
            .where(OrderLine.id.is_(None))
            .order_by(Order.id)
        )
        return list(result.scalars().all())
