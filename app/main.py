"""Main FastAPI application."""
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.database import AsyncSessionLocal, close_db, init_db
from app.api import admin, auth, cart, catalog, checkout, health, orders
from app.api.errors import register_exception_handlers
from app.services.catalog.seed import seed_catalog
from app.services.identity.session import SessionRegistry
from app.services.persistence.catalog import CatalogPersistenceService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    if settings.seed_catalog:
        async with AsyncSessionLocal() as db:
            await seed_catalog(CatalogPersistenceService(db), settings.catalog_seed_file)
    logger.info(f"{settings.restaurant_name} ordering service started")
    yield
    # Shutdown
    app.state.sessions.clear()
    await close_db()


app = FastAPI(
    title="Online Ordering",
    description="Online ordering service for a single restaurant menu",
    version="0.1.0",
    lifespan=lifespan,
)

# Browsing sessions (cart + signed-in account) are owned by the app
app.state.sessions = SessionRegistry()

register_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, tags=["auth"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(cart.router, tags=["cart"])
app.include_router(checkout.router, tags=["checkout"])
app.include_router(orders.router, tags=["orders"])
app.include_router(admin.router, tags=["admin"])


@app.get("/")
async def root():
    """Service information."""
    return {
        "message": f"{settings.restaurant_name} Online Ordering API",
        "version": "0.1.0",
    }
