"""Unit tests for the authentication endpoints and session restore."""
import pytest
from sqlalchemy import delete

from app.main import app
from app.db.models import Account
from app.services.identity.cookie import ACCOUNT_COOKIE
from app.services.identity.session import SESSION_COOKIE, SessionRegistry

# Starlette decodes cookie headers as latin-1
NON_ASCII_COOKIE = "account=abc.é".encode("latin-1")


class TestAuthAPIEndpoints:
    """Test authentication API endpoints."""

    @pytest.mark.asyncio
    async def test_register_signs_in(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "email": "new@example.com",
                "password": "secret123",
                "name": "New Customer",
                "address": "5 Road",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["authenticated"] is True
        assert data["account"]["email"] == "new@example.com"
        assert data["account"]["role"] == 0
        assert data["is_admin"] is False
        assert "password_hash" not in data["account"]
        assert ACCOUNT_COOKIE in response.cookies
        assert SESSION_COOKIE in response.cookies

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client, make_account):
        await make_account(email="taken@example.com")

        response = await client.post(
            "/api/auth/register",
            json={"email": "taken@example.com", "password": "secret123", "name": "Again"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "An account with this email already exists."

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "secret123", "name": "X"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login_success(self, client, make_account):
        await make_account(email="customer@example.com")

        response = await client.post(
            "/api/auth/login", json={"email": "customer@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["authenticated"] is True
        assert ACCOUNT_COOKIE in response.cookies

    @pytest.mark.asyncio
    async def test_login_failure(self, client, make_account):
        await make_account(email="customer@example.com")

        response = await client.post(
            "/api/auth/login", json={"email": "customer@example.com", "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password."

    @pytest.mark.asyncio
    async def test_logout(self, customer_client):
        response = await customer_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out"

        # Cookie is cleared
        set_cookie = response.headers.get("set-cookie", "")
        assert ACCOUNT_COOKIE in set_cookie
        assert "max-age=0" in set_cookie.lower()

        session = await customer_client.get("/api/auth/session")
        assert session.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_logout_keeps_cart(self, customer_client, menu):
        await customer_client.post("/api/cart/items", json={"item_id": menu["burger"].id, "quantity": 2})

        await customer_client.post("/api/auth/logout")

        cart = await customer_client.get("/api/cart")
        assert cart.json()["item_count"] == 2

    @pytest.mark.asyncio
    async def test_get_session_status_authenticated(self, customer_client):
        response = await customer_client.get("/api/auth/session")

        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is True
        assert data["account"]["email"] == "customer@example.com"

    @pytest.mark.asyncio
    async def test_get_session_status_unauthenticated(self, client):
        response = await client.get("/api/auth/session")

        assert response.status_code == 200
        assert response.json()["authenticated"] is False


class TestSessionRestore:
    """Test restoring a signed-in account from the account cookie."""

    @pytest.mark.asyncio
    async def test_restore_after_restart(self, customer_client):
        # Simulate a process restart: every in-memory session is gone
        app.state.sessions = SessionRegistry()

        response = await customer_client.get("/api/auth/session")

        assert response.json()["authenticated"] is True
        assert response.json()["cart_item_count"] == 0

    @pytest.mark.asyncio
    async def test_restore_discards_deleted_account(self, customer_client, test_db):
        app.state.sessions = SessionRegistry()
        await test_db.execute(delete(Account).where(Account.email == "customer@example.com"))
        await test_db.commit()

        response = await customer_client.get("/api/auth/session")

        assert response.json()["authenticated"] is False
        assert ACCOUNT_COOKIE not in customer_client.cookies

    @pytest.mark.asyncio
    async def test_forged_cookie_is_ignored(self, client, make_account):
        await make_account(email="victim@example.com")
        client.cookies.set(ACCOUNT_COOKIE, "eyJpZCI6MX0.deadbeef")

        response = await client.get("/api/auth/session")

        assert response.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_non_ascii_cookie_is_ignored(self, client, make_account):
        await make_account(email="victim@example.com")

        response = await client.get("/api/auth/session", headers={"cookie": NON_ASCII_COOKIE})

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_non_ascii_cookie_on_gated_route(self, client):
        response = await client.get("/api/orders", headers={"cookie": NON_ASCII_COOKIE})

        assert response.status_code == 401
        assert response.json()["redirect"] == "/login"
