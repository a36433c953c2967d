"""Shared test fixtures and configuration."""
import pytest
import os
from decimal import Decimal
from pathlib import Path
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("RESTAURANT_NAME", "Test Restaurant")

from app.main import app
from app.db.database import get_db
from app.db.models import Base
from app.services.cart.engine import CartItemSnapshot
from app.services.identity import passwords
from app.services.identity.models import AccountSnapshot, Role
from app.services.identity.session import SessionRegistry
from app.services.persistence.accounts import AccountPersistenceService
from app.services.persistence.catalog import CatalogPersistenceService
from app.services.persistence.orders import OrderPersistenceService


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Keep PBKDF2 cheap in tests."""
    monkeypatch.setattr(passwords, "ITERATIONS", 1000)


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def account_store(test_db):
    return AccountPersistenceService(test_db)


@pytest.fixture
def catalog_store(test_db):
    return CatalogPersistenceService(test_db)


@pytest.fixture
def order_store(test_db):
    return OrderPersistenceService(test_db)


@pytest.fixture
def make_account(account_store):
    """Factory for stored accounts."""

    async def _make_account(
        email: str = "customer@example.com",
        role: int = Role.CUSTOMER,
        password: str = TEST_PASSWORD,
        name: str = "Test Customer",
        address: str = None,
    ) -> AccountSnapshot:
        account = await account_store.create_account(
            email=email,
            name=name,
            password_hash=passwords.hash_password(password),
            address=address,
            role=role,
        )
        return AccountSnapshot.model_validate(account)

    return _make_account


@pytest.fixture
async def menu(catalog_store):
    """A small catalog: two active items and one inactive item."""
    category = await catalog_store.create_category("Mains", "Main dishes")
    burger = await catalog_store.create_item(
        name="Burger", price=Decimal("12.50"), description="Classic burger", category_id=category.id
    )
    fries = await catalog_store.create_item(
        name="Fries", price=Decimal("5.00"), description="Crispy fries", category_id=category.id
    )
    retired = await catalog_store.create_item(
        name="Retired Special", price=Decimal("9.00"), category_id=category.id, active=False
    )
    return {"category": category, "burger": burger, "fries": fries, "retired": retired}


@pytest.fixture
def burger_snapshot():
    return CartItemSnapshot(id=1, name="Burger", price=Decimal("12.50"))


@pytest.fixture
def fries_snapshot():
    return CartItemSnapshot(id=2, name="Fries", price=Decimal("5.00"))


@pytest.fixture
def test_seed_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
async def client(test_session_factory):
    """Create HTTP test client with a fresh session registry and the test database."""

    async def _override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.state.sessions = SessionRegistry()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Log the client in with an email and password."""

    async def _login(email: str, password: str = TEST_PASSWORD):
        response = await client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200
        return response

    return _login


@pytest.fixture
async def customer_client(client, make_account, login):
    """Client signed in as a customer with a stored address."""
    await make_account(email="customer@example.com", address="1 Main Street")
    await login("customer@example.com")
    return client


@pytest.fixture
async def admin_client(client, make_account, login):
    """Client signed in as an admin."""
    await make_account(email="admin@example.com", role=Role.ADMIN, name="Admin")
    await login("admin@example.com")
    return client
