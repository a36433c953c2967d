"""Account persistence service."""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.errors import DuplicateAccountError
from app.db.models import Account
from app.services.persistence.store import StoreService, store_operation


class AccountPersistenceService(StoreService):
    """Service for persisting account data."""

    @store_operation
    async def get_account_by_id(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        result = await self.db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    @store_operation
    async def get_account_by_email(self, email: str) -> Optional[Account]:
        """Get account by email (case-insensitive)."""
        result = await self.db.execute(
            select(Account).where(Account.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @store_operation
    async def create_account(
        self,
        email: str,
        name: str,
        password_hash: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        role: int = 0,
    ) -> Account:
        """Create a new account. Email uniqueness is enforced by the store."""
        account = Account(
            email=email.strip().lower(),
            name=name,
            password_hash=password_hash,
            phone=phone or None,
            address=address or None,
            role=role,
        )
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateAccountError() from e
        await self.db.refresh(account)
        return account
