"""Unit tests for passwords, the account cookie and the identity service."""
import pytest

from app.core.errors import DuplicateAccountError, InvalidCredentialsError, ValidationError
from app.services.identity import passwords
from app.services.identity.cookie import dump_account_record, load_account_record
from app.services.identity.models import AccountSnapshot, Role
from app.services.identity.service import IdentityService
from app.services.identity.session import BrowsingSession, SessionRegistry
from app.db.models import Account


class TestPasswordHashing:
    """Test salted password hashing."""

    def test_hash_is_salted(self):
        """Same password hashes differently each time."""
        hash1 = passwords.hash_password("testpassword123")
        hash2 = passwords.hash_password("testpassword123")

        assert hash1 != hash2
        assert hash1.startswith("pbkdf2_sha256$")

    def test_hash_does_not_contain_password(self):
        assert "testpassword123" not in passwords.hash_password("testpassword123")

    def test_verify_correct_password(self):
        stored = passwords.hash_password("testpassword123")
        assert passwords.verify_password("testpassword123", stored) is True

    def test_verify_wrong_password(self):
        stored = passwords.hash_password("testpassword123")
        assert passwords.verify_password("wrongpassword", stored) is False

    @pytest.mark.parametrize("stored", ["", "plaintext", "md5$1$salt$digest", "pbkdf2_sha256$x$salt$d"])
    def test_verify_rejects_malformed_hash(self, stored):
        assert passwords.verify_password("plaintext", stored) is False


class TestAccountCookie:
    """Test the signed account record."""

    def test_round_trip(self):
        record = {"id": 7, "email": "a@example.com", "role": 0}
        value = dump_account_record(record, "secret")

        assert load_account_record(value, "secret") == record

    def test_tampered_payload_is_rejected(self):
        value = dump_account_record({"id": 7, "role": 0}, "secret")
        forged = dump_account_record({"id": 1, "role": 2}, "other-secret")
        payload = forged.split(".")[0]
        signature = value.split(".")[1]

        assert load_account_record(f"{payload}.{signature}", "secret") is None

    def test_wrong_secret_is_rejected(self):
        value = dump_account_record({"id": 7}, "secret")
        assert load_account_record(value, "another") is None

    @pytest.mark.parametrize("value", [None, "", "garbage", "a.b.c", "abc.é", "café.ÿÿ"])
    def test_missing_or_garbage(self, value):
        assert load_account_record(value, "secret") is None


class TestSessionRegistry:
    """Test the browsing session registry."""

    def test_get_or_create_reuses_known_token(self):
        registry = SessionRegistry()
        session = registry.create()

        assert registry.get_or_create(session.token) is session
        assert len(registry) == 1

    def test_unknown_token_starts_new_session(self):
        registry = SessionRegistry()
        session = registry.get_or_create("not-a-token")

        assert session.token != "not-a-token"
        assert session.token in registry

    def test_idle_session_expires(self):
        now = [1000.0]
        registry = SessionRegistry(idle_timeout=60, max_sessions=10, clock=lambda: now[0])
        session = registry.create()

        now[0] += 30
        assert registry.get(session.token) is session

        now[0] += 61
        assert registry.get(session.token) is None
        assert session.token not in registry

    def test_use_extends_idle_timeout(self):
        now = [0.0]
        registry = SessionRegistry(idle_timeout=60, max_sessions=10, clock=lambda: now[0])
        session = registry.create()

        for _ in range(5):
            now[0] += 50
            assert registry.get_or_create(session.token) is session

    def test_create_evicts_idle_sessions(self):
        now = [0.0]
        registry = SessionRegistry(idle_timeout=60, max_sessions=100, clock=lambda: now[0])
        stale = [registry.create() for _ in range(3)]
        now[0] += 45
        fresh = registry.create()

        now[0] += 30
        registry.create()

        assert len(registry) == 2
        assert fresh.token in registry
        assert all(session.token not in registry for session in stale)

    def test_cap_drops_least_recently_used(self):
        now = [0.0]
        registry = SessionRegistry(idle_timeout=3600, max_sessions=3, clock=lambda: now[0])
        first, second, third = registry.create(), registry.create(), registry.create()

        now[0] += 1
        registry.get(first.token)
        registry.create()

        assert len(registry) == 3
        assert first.token in registry
        assert second.token not in registry
        assert third.token in registry

    def test_cookieless_traffic_stays_bounded(self):
        registry = SessionRegistry(idle_timeout=3600, max_sessions=20)

        for _ in range(50):
            registry.get_or_create(None)

        assert len(registry) == 20

    def test_sign_out_keeps_cart(self, burger_snapshot):
        session = BrowsingSession("token")
        session.sign_in(AccountSnapshot(id=1, email="a@example.com", name="A"))
        session.cart.add(burger_snapshot)

        session.sign_out()

        assert session.is_authenticated is False
        assert session.cart.item_count() == 1


class TestIdentityService:
    """Test login, registration and re-validation."""

    @pytest.mark.asyncio
    async def test_register_creates_customer(self, account_store):
        identity = IdentityService(account_store)

        account = await identity.register(
            email="New@Example.com", password="secret123", name="New", address="2 Side St"
        )

        assert account.id is not None
        assert account.email == "new@example.com"
        assert account.role == Role.CUSTOMER
        assert account.address == "2 Side St"

    @pytest.mark.asyncio
    async def test_register_stores_hash_not_password(self, account_store, test_db):
        identity = IdentityService(account_store)
        account = await identity.register(email="h@example.com", password="secret123", name="H")

        stored = await test_db.get(Account, account.id)

        assert stored.password_hash != "secret123"
        assert passwords.verify_password("secret123", stored.password_hash)

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, account_store):
        identity = IdentityService(account_store)
        await identity.register(email="dup@example.com", password="secret123", name="One")

        with pytest.raises(DuplicateAccountError):
            await identity.register(email="DUP@example.com", password="secret456", name="Two")

    @pytest.mark.asyncio
    async def test_register_short_password(self, account_store):
        identity = IdentityService(account_store)

        with pytest.raises(ValidationError):
            await identity.register(email="s@example.com", password="123", name="Short")

    @pytest.mark.asyncio
    async def test_login_success(self, account_store, make_account):
        created = await make_account(email="login@example.com")
        identity = IdentityService(account_store)

        account = await identity.login("login@example.com", "secret123")

        assert account.id == created.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, account_store, make_account):
        await make_account(email="login@example.com")
        identity = IdentityService(account_store)

        with pytest.raises(InvalidCredentialsError):
            await identity.login("login@example.com", "wrong-password")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, account_store):
        identity = IdentityService(account_store)

        with pytest.raises(InvalidCredentialsError):
            await identity.login("nobody@example.com", "secret123")

    @pytest.mark.asyncio
    async def test_restore_existing_account(self, account_store, make_account):
        created = await make_account(email="cached@example.com")
        identity = IdentityService(account_store)

        restored = await identity.restore(created.model_dump(mode="json"))

        assert restored == created

    @pytest.mark.asyncio
    async def test_restore_missing_account_is_logged_out(self, account_store):
        identity = IdentityService(account_store)

        assert await identity.restore({"id": 404, "email": "gone@example.com"}) is None
        assert await identity.restore({"id": "not-an-int"}) is None
        assert await identity.restore(None) is None

    @pytest.mark.asyncio
    async def test_revalidate_restores_once(self, account_store, make_account):
        created = await make_account(email="cached@example.com")
        identity = IdentityService(account_store)
        session = BrowsingSession("token")

        account = await identity.revalidate(session, created.model_dump(mode="json"))

        assert account == created
        assert session.restored is True

    @pytest.mark.asyncio
    async def test_revalidate_ignores_cookie_after_logout(self, account_store, make_account):
        created = await make_account(email="cached@example.com")
        identity = IdentityService(account_store)
        session = BrowsingSession("token")
        session.sign_in(created)
        identity.logout(session)

        assert await identity.revalidate(session, created.model_dump(mode="json")) is None

    @pytest.mark.asyncio
    async def test_revalidate_signs_out_deleted_account(self, account_store, make_account, test_db):
        created = await make_account(email="deleted@example.com")
        identity = IdentityService(account_store)
        session = BrowsingSession("token")
        session.sign_in(created)

        await test_db.delete(await test_db.get(Account, created.id))
        await test_db.commit()

        assert await identity.revalidate(session) is None
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    async def test_revalidate_picks_up_role_change(self, account_store, make_account, test_db):
        created = await make_account(email="promoted@example.com")
        identity = IdentityService(account_store)
        session = BrowsingSession("token")
        session.sign_in(created)

        stored = await test_db.get(Account, created.id)
        stored.role = Role.ADMIN
        await test_db.commit()

        account = await identity.revalidate(session)

        assert account.role == Role.ADMIN
        assert session.account.is_admin is True
