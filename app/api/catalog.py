"""Catalog API endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Request

from app.core.dependencies import get_catalog_repository
from app.services.catalog.models import Catalog, CatalogItemView, CategoryView
from app.services.catalog.repository import CatalogRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/catalog", response_model=Catalog)
async def get_catalog(
    request: Request,
    q: Optional[str] = None,
    category_id: Optional[int] = None,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get active items, optionally filtered by search text and category."""
    logger.info(
        f"[CATALOG] Listing requested - q: {q!r}, category_id: {category_id}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    catalog = await catalog_repository.get_catalog(search=q, category_id=category_id)
    logger.debug(f"[CATALOG] Returning {len(catalog.items)} items")
    return catalog


@router.get("/api/catalog/categories", response_model=List[CategoryView])
async def list_categories(
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get all categories."""
    return await catalog_repository.list_categories()


@router.get("/api/catalog/items/{item_id}", response_model=CatalogItemView)
async def get_item(
    item_id: int,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get a single active item."""
    return await catalog_repository.get_item(item_id)
