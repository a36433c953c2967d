"""Order submission.

Turns a cart into a stored order header plus one line per cart line. The
header is written and committed first; lines are only attempted once the
header is known to exist, so a failure between the two writes can always be
reported with the id of the header left behind.
"""
import logging
from decimal import Decimal
from typing import Optional

from app.core.errors import (
    EmptyCartError,
    PartialOrderError,
    StoreUnavailableError,
    UnauthenticatedError,
    ValidationError,
)
from app.services.cart.engine import Cart
from app.services.identity.models import AccountSnapshot
from app.services.ordering.models import CheckoutPreview, DeliveryMode
from app.services.persistence.orders import OrderPersistenceService

logger = logging.getLogger(__name__)


class OrderSubmissionService:
    """Service for placing orders from a cart."""

    def __init__(self, orders: OrderPersistenceService, delivery_fee: Decimal):
        self.orders = orders
        self.fee = Decimal(delivery_fee)

    def delivery_fee(self, mode: DeliveryMode) -> Decimal:
        """Fee charged for a delivery mode."""
        return self.fee if mode == DeliveryMode.DELIVERY else Decimal("0")

    def preview(self, cart: Cart, mode: DeliveryMode) -> CheckoutPreview:
        """Compute checkout totals without writing anything."""
        subtotal = cart.total()
        fee = self.delivery_fee(mode)
        return CheckoutPreview(
            delivery_mode=mode,
            item_count=cart.item_count(),
            subtotal=subtotal,
            delivery_fee=fee,
            total=subtotal + fee,
        )

    async def submit(
        self,
        cart: Cart,
        account: Optional[AccountSnapshot],
        mode: DeliveryMode,
        delivery_address: Optional[str] = None,
        expected_total: Optional[Decimal] = None,
    ) -> int:
        """
        Place an order for the cart's contents.

        Args:
            cart: Cart to submit; cleared only on success
            account: Signed-in account placing the order
            mode: Delivery mode
            delivery_address: Address for delivery; defaults to the account's address
            expected_total: Total the client displayed, checked against the recomputed one

        Returns:
            ID of the new order
        """
        if account is None:
            raise UnauthenticatedError()
        if cart.is_empty:
            raise EmptyCartError()

        address = None
        if mode == DeliveryMode.DELIVERY:
            address = (delivery_address or account.address or "").strip()
            if not address:
                raise ValidationError("A delivery address is required")

        lines = cart.snapshot()
        preview = self.preview(cart, mode)
        if expected_total is not None and Decimal(expected_total) != preview.total:
            logger.warning(
                f"[CHECKOUT] Client total {expected_total} does not match "
                f"recomputed total {preview.total} - Account: {account.id}"
            )
            raise ValidationError(
                f"Cart total changed to {preview.total}; please review your order"
            )

        logger.info(
            f"[CHECKOUT] Submitting order - Account: {account.id}, Mode: {mode}, "
            f"Lines: {len(lines)}, Items: {preview.item_count}, Total: {preview.total}"
        )

        # A failure here leaves nothing behind, so it surfaces as-is
        order = await self.orders.create_order(
            account_id=account.id,
            total_amount=preview.total,
            delivery_mode=mode.value,
            delivery_fee=preview.delivery_fee,
            delivery_address=address,
        )

        try:
            await self.orders.add_order_lines(
                order.id,
                [
                    {
                        "item_id": line.item_id,
                        "quantity": line.quantity,
                        "unit_price": line.unit_price,
                    }
                    for line in lines
                ],
            )
        except StoreUnavailableError as e:
            logger.error(
                f"[CHECKOUT] Order {order.id} stored without its lines - "
                f"Account: {account.id}, needs reconciliation"
            )
            raise PartialOrderError(order.id) from e

        cart.clear()
        logger.info(f"[CHECKOUT] Order {order.id} placed - Account: {account.id}")
        return order.id
