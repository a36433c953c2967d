"""Browsing sessions.

A browsing session is one client's cart plus the account it is signed in as.
Sessions live in a SessionRegistry owned by the application object; nothing
here is module-level state.
"""
import logging
import time
import secrets
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Optional

from app.core.config import settings
from app.services.cart.engine import Cart
from app.services.identity.models import AccountSnapshot

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"


def create_session_token() -> str:
    """Generate a secure session token."""
    return secrets.token_urlsafe(32)


class BrowsingSession:
    """Cart and identity for one browsing context."""

    def __init__(self, token: str, last_seen: float = 0.0):
        self.token = token
        self.cart = Cart()
        self.account: Optional[AccountSnapshot] = None
        # Set once the cached account cookie has been checked against the store
        self.restored = False
        self.created_at = datetime.utcnow()
        # Monotonic time of the last request that used this session
        self.last_seen = last_seen

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None

    def sign_in(self, account: AccountSnapshot) -> None:
        self.account = account
        self.restored = True

    def sign_out(self) -> None:
        """Drop the account. The cart is kept."""
        self.account = None
        self.restored = True


class SessionRegistry:
    """In-process store of browsing sessions keyed by token.

    Sessions idle for longer than ``idle_timeout`` seconds are evicted, and the
    least recently used ones are dropped once ``max_sessions`` is reached. A
    signed-in customer is restored from the account cookie after eviction; only
    the cart is lost.
    """

    def __init__(
        self,
        idle_timeout: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_timeout = (
            idle_timeout if idle_timeout is not None else settings.session_idle_timeout_seconds
        )
        self.max_sessions = max_sessions if max_sessions is not None else settings.max_browsing_sessions
        self._clock = clock
        # Ordered least recently used first
        self._sessions: "OrderedDict[str, BrowsingSession]" = OrderedDict()

    def get(self, token: Optional[str]) -> Optional[BrowsingSession]:
        if not token:
            return None
        session = self._sessions.get(token)
        if session is None:
            return None
        now = self._clock()
        if now - session.last_seen > self.idle_timeout:
            self.discard(token)
            return None
        session.last_seen = now
        self._sessions.move_to_end(token)
        return session

    def create(self) -> BrowsingSession:
        self.evict_idle()
        while len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            self.discard(oldest)
            logger.info("[SESSION] Session limit reached - evicted least recently used session")
        session = BrowsingSession(create_session_token(), last_seen=self._clock())
        self._sessions[session.token] = session
        logger.debug(f"[SESSION] Created browsing session - total: {len(self._sessions)}")
        return session

    def get_or_create(self, token: Optional[str]) -> BrowsingSession:
        """Return the session for token, or a fresh one if it is unknown or expired."""
        return self.get(token) or self.create()

    def evict_idle(self) -> int:
        """Drop every session idle past the timeout. Returns how many were dropped."""
        cutoff = self._clock() - self.idle_timeout
        expired = []
        for token, session in self._sessions.items():
            if session.last_seen >= cutoff:
                break
            expired.append(token)
        for token in expired:
            self.discard(token)
        if expired:
            logger.debug(f"[SESSION] Evicted {len(expired)} idle sessions - total: {len(self._sessions)}")
        return len(expired)

    def discard(self, token: str) -> None:
        self._sessions.pop(token, None)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: str) -> bool:
        return token in self._sessions
