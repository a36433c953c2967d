"""Identity service: login, registration, logout and session re-validation."""
import logging
from typing import Any, Dict, Optional

from app.core.errors import InvalidCredentialsError, ValidationError
from app.services.identity.models import AccountSnapshot, Role
from app.services.identity.passwords import hash_password, verify_password
from app.services.identity.session import BrowsingSession
from app.services.persistence.accounts import AccountPersistenceService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class IdentityService:
    """Resolves credentials and cached records to accounts."""

    def __init__(self, accounts: AccountPersistenceService):
        self.accounts = accounts

    async def resolve(self, account_id: int) -> Optional[AccountSnapshot]:
        """Load the current state of an account, or None if it no longer exists."""
        account = await self.accounts.get_account_by_id(account_id)
        return AccountSnapshot.model_validate(account) if account else None

    async def restore(self, record: Optional[Dict[str, Any]]) -> Optional[AccountSnapshot]:
        """Resolve a cached account record against the store.

        A record whose account is gone is treated as logged out, not as an error.
        """
        if not record:
            return None
        account_id = record.get("id")
        if not isinstance(account_id, int):
            return None
        account = await self.resolve(account_id)
        if account is None:
            logger.info(f"[AUTH] Cached account {account_id} no longer exists, discarding session")
        return account

    async def login(self, email: str, password: str) -> AccountSnapshot:
        """Resolve a credential pair to exactly one account."""
        account = await self.accounts.get_account_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            logger.info(f"[AUTH] Failed login attempt for '{email}'")
            raise InvalidCredentialsError()
        logger.info(f"[AUTH] Account {account.id} logged in")
        return AccountSnapshot.model_validate(account)

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> AccountSnapshot:
        """Create a customer account. Raises DuplicateAccountError for a taken email."""
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not name.strip():
            raise ValidationError("Name is required")
        account = await self.accounts.create_account(
            email=email,
            name=name.strip(),
            password_hash=hash_password(password),
            phone=phone,
            address=address,
            role=Role.CUSTOMER,
        )
        logger.info(f"[AUTH] Registered account {account.id}")
        return AccountSnapshot.model_validate(account)

    async def revalidate(
        self, session: BrowsingSession, cached_record: Optional[Dict[str, Any]] = None
    ) -> Optional[AccountSnapshot]:
        """Bring a session's account up to date with the store.

        On the first check of a session the cached record (if any) is restored.
        Afterwards the signed-in account is re-resolved so a deleted account
        logs the session out and a changed role takes effect immediately.
        """
        if session.account is None:
            if not session.restored:
                account = await self.restore(cached_record)
                if account:
                    session.sign_in(account)
                else:
                    session.sign_out()
            return session.account

        account = await self.resolve(session.account.id)
        if account is None:
            logger.info(f"[AUTH] Account {session.account.id} disappeared, signing session out")
            session.sign_out()
        else:
            session.account = account
        return session.account

    @staticmethod
    def logout(session: BrowsingSession) -> None:
        """Clear the session's account unconditionally."""
        session.sign_out()
