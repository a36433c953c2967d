"""Catalog management (admin write path)."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from app.core.errors import NotFoundError, ValidationError
from app.services.catalog.models import CatalogItemView, CategoryView
from app.services.persistence.catalog import CatalogPersistenceService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "description", "price", "image_url", "category_id", "active"}


def parse_price(value: Any) -> Decimal:
    """Parse a price into a non-negative two-place decimal."""
    try:
        price = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, AttributeError):
        raise ValidationError(f"Invalid price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise ValidationError(f"Invalid price: {value!r}")
    return price.quantize(Decimal("0.01"))


class CatalogManager:
    """Service for creating, editing and removing catalog entries."""

    def __init__(self, store: CatalogPersistenceService):
        self.store = store

    async def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and await self.store.get_category_by_id(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")

    async def create_category(self, name: str, description: Optional[str] = None) -> CategoryView:
        """Create a category."""
        if not name.strip():
            raise ValidationError("Category name is required")
        category = await self.store.create_category(name.strip(), description)
        logger.info(f"[CATALOG] Created category {category.id} '{category.name}'")
        return CategoryView.model_validate(category)

    async def create_item(
        self,
        name: str,
        price: Any,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        category_id: Optional[int] = None,
        active: bool = True,
    ) -> CatalogItemView:
        """Create a catalog item."""
        if not name.strip():
            raise ValidationError("Item name is required")
        await self._check_category(category_id)
        item = await self.store.create_item(
            name=name.strip(),
            price=parse_price(price),
            description=description,
            image_url=image_url,
            category_id=category_id,
            active=active,
        )
        logger.info(f"[CATALOG] Created item {item.id} '{item.name}' at {item.price}")
        return CatalogItemView.model_validate(item)

    async def update_item(self, item_id: int, changes: Dict[str, Any]) -> CatalogItemView:
        """Apply a partial update to an item."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        changes = dict(changes)
        if "price" in changes:
            changes["price"] = parse_price(changes["price"])
        if "name" in changes:
            if not (changes["name"] or "").strip():
                raise ValidationError("Item name is required")
            changes["name"] = changes["name"].strip()
        if "category_id" in changes:
            await self._check_category(changes["category_id"])

        item = await self.store.update_item(item_id, changes)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        logger.info(f"[CATALOG] Updated item {item_id} - fields: {sorted(changes)}")
        return CatalogItemView.model_validate(item)

    async def toggle_active(self, item_id: int) -> CatalogItemView:
        """Flip an item's active flag."""
        item = await self.store.get_item_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")
        return await self.update_item(item_id, {"active": not item.active})

    async def delete_item(self, item_id: int) -> None:
        """Delete an item that no order refers to."""
        if await self.store.item_has_order_lines(item_id):
            raise ValidationError(
                f"Item {item_id} appears in existing orders; deactivate it instead"
            )
        if not await self.store.delete_item(item_id):
            raise NotFoundError(f"Item {item_id} not found")
        logger.info(f"[CATALOG] Deleted item {item_id}")
