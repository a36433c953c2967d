"""Access gate.

Protected actions are checked in two steps: is the subject authenticated, and
does its role tier reach the action's minimum. Failing the first sends the
subject to the login entry point whatever role was required; failing the
second sends it to the landing page.

The staff tier is part of the role model but no capability is granted to it
yet; catalog mutation stays admin-only until that is decided.
"""
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel

from app.core.errors import (
    LANDING_PATH,
    LOGIN_PATH,
    AuthorizationError,
    UnauthenticatedError,
)
from app.services.identity.models import AccountSnapshot, Role


class Capability(str, Enum):
    """Protected actions."""

    VIEW_OWN_ORDERS = "view_own_orders"
    CHECKOUT = "checkout"
    MANAGE_CATALOG = "manage_catalog"
    VIEW_ADMIN_DASHBOARD = "view_admin_dashboard"

    def __str__(self) -> str:
        return self.value


MINIMUM_ROLE: Dict[Capability, Role] = {
    Capability.VIEW_OWN_ORDERS: Role.CUSTOMER,
    Capability.CHECKOUT: Role.CUSTOMER,
    Capability.MANAGE_CATALOG: Role.ADMIN,
    Capability.VIEW_ADMIN_DASHBOARD: Role.ADMIN,
}


class AccessDecision(BaseModel):
    """Outcome of a gate check."""

    allowed: bool
    redirect_to: Optional[str] = None


def evaluate(account: Optional[AccountSnapshot], capability: Capability) -> AccessDecision:
    """Decide whether account may perform capability."""
    if account is None:
        return AccessDecision(allowed=False, redirect_to=LOGIN_PATH)
    if not account.has_role(MINIMUM_ROLE[capability]):
        return AccessDecision(allowed=False, redirect_to=LANDING_PATH)
    return AccessDecision(allowed=True)


def authorize(account: Optional[AccountSnapshot], capability: Capability) -> AccountSnapshot:
    """Return the account if allowed, otherwise raise the matching error."""
    decision = evaluate(account, capability)
    if decision.allowed:
        return account
    if decision.redirect_to == LOGIN_PATH:
        raise UnauthenticatedError()
    raise AuthorizationError()
