"""Order models."""
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel


class DeliveryMode(str, Enum):
    """How the customer receives the order."""

    IN_VENUE = "in-venue"
    DELIVERY = "delivery"

    def __str__(self) -> str:
        return self.value


class OrderStatus(str, Enum):
    """Order lifecycle. Only staff move an order out of PENDING."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class CheckoutPreview(BaseModel):
    """Totals shown before an order is placed."""

    delivery_mode: DeliveryMode
    item_count: int
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal
