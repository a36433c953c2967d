"""Store boundary shared by the persistence services."""
import asyncio
import functools
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import OrderingError, StoreUnavailableError

logger = logging.getLogger(__name__)


def store_operation(func):
    """Bound a store call by the configured timeout and convert driver failures.

    Domain errors raised inside the call pass through untouched; anything the
    database layer raises becomes StoreUnavailableError.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await asyncio.wait_for(func(self, *args, **kwargs), timeout=self.timeout)
        except OrderingError:
            raise
        except (SQLAlchemyError, asyncio.TimeoutError, OSError) as e:
            logger.error(
                f"[STORE] {func.__qualname__} failed - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            await self._rollback_quietly()
            raise StoreUnavailableError() from e

    return wrapper


class StoreService:
    """Base class for services that talk to the database."""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    async def _rollback_quietly(self) -> None:
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"[STORE] Rollback after failure also failed: {type(e).__name__}: {str(e)}")
