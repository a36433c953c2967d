"""Catalog repository (read path)."""
from typing import List, Optional

from app.core.errors import NotFoundError
from app.services.cart.engine import CartItemSnapshot
from app.services.catalog.models import Catalog, CatalogItemView, CategoryView
from app.services.persistence.catalog import CatalogPersistenceService


class CatalogRepository:
    """Read-only projection of the catalog."""

    def __init__(self, store: CatalogPersistenceService):
        self.store = store

    async def get_catalog(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        include_inactive: bool = False,
    ) -> Catalog:
        """Get items and categories, optionally filtered by search text or category."""
        items = await self.store.list_items(
            search=search, category_id=category_id, include_inactive=include_inactive
        )
        categories = await self.store.list_categories()
        return Catalog(
            items=[CatalogItemView.model_validate(item) for item in items],
            categories=[CategoryView.model_validate(category) for category in categories],
        )

    async def list_categories(self) -> List[CategoryView]:
        """Get all categories."""
        categories = await self.store.list_categories()
        return [CategoryView.model_validate(category) for category in categories]

    async def get_item(self, item_id: int, include_inactive: bool = False) -> CatalogItemView:
        """Get an item. Inactive items are hidden unless asked for."""
        item = await self.store.get_item_by_id(item_id)
        if item is None or (not item.active and not include_inactive):
            raise NotFoundError(f"Item {item_id} not found")
        return CatalogItemView.model_validate(item)

    async def get_item_snapshot(self, item_id: int) -> CartItemSnapshot:
        """Capture the fields a cart keeps for an active item."""
        item = await self.get_item(item_id)
        return CartItemSnapshot(
            id=item.id, name=item.name, price=item.price, image_url=item.image_url
        )
