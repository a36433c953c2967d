"""Cart engine.

An in-memory, insertion-ordered collection of (item snapshot, quantity) lines
owned by a single browsing session. All mutations are synchronous and never
raise: non-positive quantities and unknown item ids are absorbed here so the
invariants below always hold.

- at most one line per item id
- every line has quantity >= 1
- ``total()`` and ``item_count()`` are the only source of derived totals
"""
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


class CartItemSnapshot(BaseModel):
    """Catalog fields captured when an item is added to a cart."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    price: Decimal = Field(ge=0)
    image_url: Optional[str] = None


class CartLine(BaseModel):
    """One cart line."""

    model_config = ConfigDict(frozen=True)

    item: CartItemSnapshot
    quantity: int = Field(ge=1)

    @property
    def item_id(self) -> int:
        return self.item.id

    @property
    def unit_price(self) -> Decimal:
        return self.item.price

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity


class Cart:
    """Session-scoped shopping cart."""

    def __init__(self):
        # dicts keep insertion order, which is the display order of the cart
        self._lines: Dict[int, CartLine] = {}

    def add(self, item: CartItemSnapshot, quantity: int = 1) -> None:
        """Add quantity of an item, merging with an existing line."""
        if quantity <= 0:
            return
        existing = self._lines.get(item.id)
        if existing:
            self._lines[item.id] = existing.model_copy(
                update={"quantity": existing.quantity + quantity}
            )
        else:
            self._lines[item.id] = CartLine(item=item, quantity=quantity)

    def remove(self, item_id: int) -> None:
        """Remove an item's line if present."""
        self._lines.pop(item_id, None)

    def set_quantity(self, item_id: int, quantity: int) -> None:
        """Replace a line's quantity in place; zero or less removes it."""
        if quantity <= 0:
            self.remove(item_id)
            return
        existing = self._lines.get(item_id)
        if existing:
            self._lines[item_id] = existing.model_copy(update={"quantity": quantity})

    def clear(self) -> None:
        """Empty the cart."""
        self._lines.clear()

    def total(self) -> Decimal:
        """Sum of unit price times quantity over all lines."""
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def item_count(self) -> int:
        """Sum of line quantities."""
        return sum(line.quantity for line in self._lines.values())

    def get(self, item_id: int) -> Optional[CartLine]:
        return self._lines.get(item_id)

    def snapshot(self) -> Tuple[CartLine, ...]:
        """Immutable copy of the current lines."""
        return tuple(self._lines.values())

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.snapshot())
