"""Admin dashboard summary."""
from typing import Dict, List
from pydantic import BaseModel

from app.services.ordering.models import OrderStatus
from app.services.persistence.catalog import CatalogPersistenceService
from app.services.persistence.orders import OrderPersistenceService


class DashboardSummary(BaseModel):
    """Counts shown on the admin dashboard."""

    item_count: int
    active_item_count: int
    category_count: int
    orders_by_status: Dict[str, int]
    orders_without_lines: List[int] = []


async def build_dashboard(
    catalog: CatalogPersistenceService, orders: OrderPersistenceService
) -> DashboardSummary:
    """Collect catalog and order counts.

    ``orders_without_lines`` lists headers left behind by a partially failed
    submission so they can be reconciled by hand.
    """
    by_status = {status.value: 0 for status in OrderStatus}
    by_status.update(await orders.count_orders_by_status())
    return DashboardSummary(
        item_count=await catalog.count_items(),
        active_item_count=await catalog.count_items(active_only=True),
        category_count=await catalog.count_categories(),
        orders_by_status=by_status,
        orders_without_lines=await orders.list_orders_without_lines(),
    )
