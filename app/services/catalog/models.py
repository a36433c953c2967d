"""Catalog models."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class CategoryView(BaseModel):
    """Category as exposed to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class CatalogItemView(BaseModel):
    """Catalog item as exposed to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    active: bool = True
    created_at: Optional[datetime] = None


class Catalog(BaseModel):
    """Catalog listing."""

    items: List[CatalogItemView]
    categories: List[CategoryView] = []
