"""Admin API endpoints: dashboard and catalog management."""
import logging
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.dependencies import (
    get_catalog_manager,
    get_catalog_repository,
    get_catalog_store,
    get_order_store,
    require,
)
from app.services.access.gate import Capability
from app.services.admin.dashboard import DashboardSummary, build_dashboard
from app.services.catalog.manager import CatalogManager
from app.services.catalog.models import CatalogItemView, CategoryView
from app.services.catalog.repository import CatalogRepository
from app.services.identity.models import AccountSnapshot
from app.services.persistence.catalog import CatalogPersistenceService
from app.services.persistence.orders import OrderPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)


class ItemCreateRequest(BaseModel):
    """Item creation request model."""
    name: str
    price: Decimal
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    active: bool = True


class ItemUpdateRequest(BaseModel):
    """Partial item update request model."""
    name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    active: Optional[bool] = None


class CategoryCreateRequest(BaseModel):
    """Category creation request model."""
    name: str
    description: Optional[str] = None


@router.get("/api/admin/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    account: AccountSnapshot = Depends(require(Capability.VIEW_ADMIN_DASHBOARD)),
    catalog_store: CatalogPersistenceService = Depends(get_catalog_store),
    order_store: OrderPersistenceService = Depends(get_order_store),
):
    """Get catalog and order counts."""
    return await build_dashboard(catalog_store, order_store)


@router.get("/api/admin/items", response_model=List[CatalogItemView])
async def list_items(
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get every item including inactive ones."""
    catalog = await catalog_repository.get_catalog(include_inactive=True)
    return catalog.items


@router.post("/api/admin/items", response_model=CatalogItemView, status_code=201)
async def create_item(
    item_req: ItemCreateRequest,
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    manager: CatalogManager = Depends(get_catalog_manager),
):
    """Create a catalog item."""
    logger.info(f"[ADMIN] Account {account.id} creating item '{item_req.name}'")
    return await manager.create_item(**item_req.model_dump())


@router.patch("/api/admin/items/{item_id}", response_model=CatalogItemView)
async def update_item(
    item_id: int,
    item_req: ItemUpdateRequest,
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    manager: CatalogManager = Depends(get_catalog_manager),
):
    """Update the fields sent in the request."""
    logger.info(f"[ADMIN] Account {account.id} updating item {item_id}")
    return await manager.update_item(item_id, item_req.model_dump(exclude_unset=True))


@router.post("/api/admin/items/{item_id}/toggle-active", response_model=CatalogItemView)
async def toggle_item_active(
    item_id: int,
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    manager: CatalogManager = Depends(get_catalog_manager),
):
    """Show or hide an item in the public catalog."""
    return await manager.toggle_active(item_id)


@router.delete("/api/admin/items/{item_id}", status_code=204)
async def delete_item(
    item_id: int,
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    manager: CatalogManager = Depends(get_catalog_manager),
):
    """Delete an item that has never been ordered."""
    logger.info(f"[ADMIN] Account {account.id} deleting item {item_id}")
    await manager.delete_item(item_id)


@router.post("/api/admin/categories", response_model=CategoryView, status_code=201)
async def create_category(
    category_req: CategoryCreateRequest,
    account: AccountSnapshot = Depends(require(Capability.MANAGE_CATALOG)),
    manager: CatalogManager = Depends(get_catalog_manager),
):
    """Create a category."""
    return await manager.create_category(category_req.name, category_req.description)
