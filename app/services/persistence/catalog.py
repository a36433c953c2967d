"""Catalog persistence service."""
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import func, or_, select

from app.db.models import CatalogItem, Category, OrderLine
from app.services.persistence.store import StoreService, store_operation


class CatalogPersistenceService(StoreService):
    """Service for reading and writing catalog items and categories."""

    @store_operation
    async def list_categories(self) -> List[Category]:
        """Get all categories ordered by name."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    @store_operation
    async def get_category_by_id(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    @store_operation
    async def create_category(self, name: str, description: Optional[str] = None) -> Category:
        """Create a new category."""
        category = Category(name=name, description=description)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category

    @store_operation
    async def list_items(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        include_inactive: bool = False,
    ) -> List[CatalogItem]:
        """Get items ordered by name, optionally filtered."""
        query = select(CatalogItem).order_by(CatalogItem.name)
        if not include_inactive:
            query = query.where(CatalogItem.active.is_(True))
        if category_id is not None:
            query = query.where(CatalogItem.category_id == category_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(CatalogItem.name).like(pattern),
                    func.lower(func.coalesce(CatalogItem.description, "")).like(pattern),
                )
            )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    @store_operation
    async def get_item_by_id(self, item_id: int) -> Optional[CatalogItem]:
        """Get item by ID regardless of its active flag."""
        result = await self.db.execute(select(CatalogItem).where(CatalogItem.id == item_id))
        return result.scalar_one_or_none()

    @store_operation
    async def create_item(
        self,
        name: str,
        price: Decimal,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        category_id: Optional[int] = None,
        active: bool = True,
    ) -> CatalogItem:
        """Create a new catalog item."""
        item = CatalogItem(
            name=name,
            price=price,
            description=description,
            image_url=image_url,
            category_id=category_id,
            active=active,
        )
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    @store_operation
    async def update_item(self, item_id: int, changes: Dict[str, Any]) -> Optional[CatalogItem]:
        """Apply field changes to an item."""
        result = await self.db.execute(select(CatalogItem).where(CatalogItem.id == item_id))
        item = result.scalar_one_or_none()
        if item:
            for field, value in changes.items():
                setattr(item, field, value)
            await self.db.commit()
            await self.db.refresh(item)
        return item

    @store_operation
    async def delete_item(self, item_id: int) -> bool:
        """Delete an item. Returns False if it did not exist."""
        result = await self.db.execute(select(CatalogItem).where(CatalogItem.id == item_id))
        item = result.scalar_one_or_none()
        if not item:
            return False
        await self.db.delete(item)
        await self.db.commit()
        return True

    @store_operation
    async def item_has_order_lines(self, item_id: int) -> bool:
        """Check whether any order references the item."""
        result = await self.db.execute(
            select(func.count(OrderLine.id)).where(OrderLine.item_id == item_id)
        )
        return result.scalar_one() > 0

    @store_operation
    async def count_items(self, active_only: bool = False) -> int:
        """Count catalog items."""
        query = select(func.count(CatalogItem.id))
        if active_only:
            query = query.where(CatalogItem.active.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one()

    @store_operation
    async def count_categories(self) -> int:
        """Count categories."""
        result = await self.db.execute(select(func.count(Category.id)))
        return result.scalar_one()
