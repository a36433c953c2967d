"""Cart API endpoints."""
import logging
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.dependencies import get_browsing_session, get_catalog_repository
from app.services.cart.engine import Cart
from app.services.catalog.repository import CatalogRepository
from app.services.identity.session import BrowsingSession

router = APIRouter()
logger = logging.getLogger(__name__)


class AddToCartRequest(BaseModel):
    """Add-to-cart request model."""
    item_id: int
    quantity: int = 1


class SetQuantityRequest(BaseModel):
    """Quantity update request model."""
    quantity: int


class CartLineResponse(BaseModel):
    """Cart line response model."""
    item_id: int
    name: str
    unit_price: Decimal
    image_url: Optional[str] = None
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    """Cart response model."""
    lines: List[CartLineResponse] = []
    item_count: int = 0
    total: Decimal = Decimal("0")


def cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        lines=[
            CartLineResponse(
                item_id=line.item_id,
                name=line.item.name,
                unit_price=line.unit_price,
                image_url=line.item.image_url,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in cart.lines
        ],
        item_count=cart.item_count(),
        total=cart.total(),
    )


@router.get("/api/cart", response_model=CartResponse)
async def get_cart(session: BrowsingSession = Depends(get_browsing_session)):
    """Get the session's cart."""
    return cart_response(session.cart)


@router.post("/api/cart/items", response_model=CartResponse)
async def add_to_cart(
    add_req: AddToCartRequest,
    session: BrowsingSession = Depends(get_browsing_session),
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Add an active catalog item to the cart."""
    if add_req.quantity > 0:
        snapshot = await catalog_repository.get_item_snapshot(add_req.item_id)
        session.cart.add(snapshot, add_req.quantity)
        logger.debug(
            f"[CART] Added item {add_req.item_id} x{add_req.quantity} - "
            f"cart now has {session.cart.item_count()} items"
        )
    return cart_response(session.cart)


@router.put("/api/cart/items/{item_id}", response_model=CartResponse)
async def set_cart_quantity(
    item_id: int,
    set_req: SetQuantityRequest,
    session: BrowsingSession = Depends(get_browsing_session),
):
    """Set a line's quantity; zero or less removes the line."""
    session.cart.set_quantity(item_id, set_req.quantity)
    return cart_response(session.cart)


@router.delete("/api/cart/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    item_id: int,
    session: BrowsingSession = Depends(get_browsing_session),
):
    """Remove an item from the cart."""
    session.cart.remove(item_id)
    return cart_response(session.cart)


@router.delete("/api/cart", response_model=CartResponse)
async def clear_cart(session: BrowsingSession = Depends(get_browsing_session)):
    """Empty the cart."""
    session.cart.clear()
    return cart_response(session.cart)
