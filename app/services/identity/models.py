"""Identity models."""
from datetime import datetime
from enum import IntEnum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class Role(IntEnum):
    """Ordinal access tiers. Higher tiers satisfy every lower-tier check."""

    CUSTOMER = 0
    STAFF = 1
    ADMIN = 2


class AccountSnapshot(BaseModel):
    """Flat account record held by a session. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    email: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    role: int = Role.CUSTOMER
    created_at: Optional[datetime] = None

    def has_role(self, minimum: Role) -> bool:
        """Check the account's tier against a minimum tier."""
        return self.role >= minimum

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role >= Role.STAFF
