"""FastAPI dependencies."""
from typing import Optional
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.services.access.gate import Capability, authorize
from app.services.catalog.manager import CatalogManager
from app.services.catalog.repository import CatalogRepository
from app.services.identity.cookie import ACCOUNT_COOKIE, load_account_record
from app.services.identity.models import AccountSnapshot
from app.services.identity.service import IdentityService
from app.services.identity.session import SESSION_COOKIE, BrowsingSession, SessionRegistry
from app.services.ordering.history import OrderHistoryService
from app.services.ordering.submission import OrderSubmissionService
from app.services.persistence.accounts import AccountPersistenceService
from app.services.persistence.catalog import CatalogPersistenceService
from app.services.persistence.orders import OrderPersistenceService


def get_account_store(db: AsyncSession = Depends(get_db)) -> AccountPersistenceService:
    """Get account persistence service."""
    return AccountPersistenceService(db)


def get_catalog_store(db: AsyncSession = Depends(get_db)) -> CatalogPersistenceService:
    """Get catalog persistence service."""
    return CatalogPersistenceService(db)


def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderPersistenceService:
    """Get order persistence service."""
    return OrderPersistenceService(db)


def get_identity_service(
    accounts: AccountPersistenceService = Depends(get_account_store),
) -> IdentityService:
    """Get identity service instance."""
    return IdentityService(accounts)


def get_catalog_repository(
    store: CatalogPersistenceService = Depends(get_catalog_store),
) -> CatalogRepository:
    """Get catalog repository instance."""
    return CatalogRepository(store)


def get_catalog_manager(
    store: CatalogPersistenceService = Depends(get_catalog_store),
) -> CatalogManager:
    """Get catalog manager instance."""
    return CatalogManager(store)


def get_order_submission_service(
    orders: OrderPersistenceService = Depends(get_order_store),
) -> OrderSubmissionService:
    """Get order submission service instance."""
    return OrderSubmissionService(orders, delivery_fee=settings.delivery_fee)


def get_order_history_service(
    orders: OrderPersistenceService = Depends(get_order_store),
) -> OrderHistoryService:
    """Get order history service instance."""
    return OrderHistoryService(orders)


def get_session_registry(request: Request) -> SessionRegistry:
    """Get the application's session registry."""
    return request.app.state.sessions


def get_browsing_session(
    request: Request,
    response: Response,
    registry: SessionRegistry = Depends(get_session_registry),
) -> BrowsingSession:
    """Get the caller's browsing session, starting one if the cookie is unknown."""
    token = request.cookies.get(SESSION_COOKIE)
    session = registry.get_or_create(token)
    if session.token != token:
        response.set_cookie(
            key=SESSION_COOKIE,
            value=session.token,
            httponly=True,
            max_age=settings.session_cookie_max_age,
            samesite="lax",
        )
    return session


async def get_current_account(
    request: Request,
    response: Response,
    session: BrowsingSession = Depends(get_browsing_session),
    identity: IdentityService = Depends(get_identity_service),
) -> Optional[AccountSnapshot]:
    """Get the signed-in account, re-validated against the store."""
    cookie_value = request.cookies.get(ACCOUNT_COOKIE)
    cached = load_account_record(cookie_value, settings.session_secret_key)
    account = await identity.revalidate(session, cached)
    if account is None and cookie_value:
        response.delete_cookie(ACCOUNT_COOKIE)
    return account


def require(capability: Capability):
    """Build a dependency that lets the request through only if capability is granted."""

    async def _require(
        account: Optional[AccountSnapshot] = Depends(get_current_account),
    ) -> AccountSnapshot:
        return authorize(account, capability)

    return _require
