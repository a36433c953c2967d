"""Error taxonomy for the ordering service.

Every failure that reaches the HTTP layer is one of these kinds. Store errors
are converted at the persistence boundary, so nothing unstructured escapes a
service.
"""
from typing import Optional

LOGIN_PATH = "/login"
LANDING_PATH = "/"
CART_PATH = "/cart"


class OrderingError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    redirect: Optional[str] = None

    def __init__(self, message: Optional[str] = None):
        self.message = message or (self.__doc__ or "").strip()
        super().__init__(self.message)


class ValidationError(OrderingError):
    """Malformed input."""

    status_code = 422


class NotFoundError(OrderingError):
    """Requested record does not exist."""

    status_code = 404


class AuthError(OrderingError):
    """Authentication failure."""

    status_code = 401


class InvalidCredentialsError(AuthError):
    """Invalid email or password."""


class DuplicateAccountError(AuthError):
    """An account with this email already exists."""

    status_code = 409


class UnauthenticatedError(AuthError):
    """Authentication required."""

    redirect = LOGIN_PATH


class AuthorizationError(OrderingError):
    """Insufficient role for this action."""

    status_code = 403
    redirect = LANDING_PATH


class EmptyCartError(OrderingError):
    """Cart is empty."""

    status_code = 409
    redirect = CART_PATH


class PartialOrderError(OrderingError):
    """Order header was stored but its lines were not."""

    status_code = 500

    def __init__(self, order_id: int, message: Optional[str] = None):
        super().__init__(message or f"Order {order_id} was created without its items")
        self.order_id = order_id


class StoreUnavailableError(OrderingError):
    """Service temporarily unavailable, please try again."""

    status_code = 503
