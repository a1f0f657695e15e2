"""
Server-side login sessions.

The browser only ever holds an opaque session id inside a signed
cookie; the mapping from that id to a user lives here. Sessions
expire after a fixed TTL and a periodic sweep evicts stale entries.
"""

import asyncio
import logging
import secrets
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from botdash.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LoginSession:
    """An authenticated session bound to one user."""
    session_id: str
    user_id: int
    expires_at: float
    created_at: float = field(default_factory=time.time)

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if the session is past its expiry time."""
        return (now if now is not None else time.time()) >= self.expires_at


class SessionStore(ABC):
    """Storage for login sessions."""

    @abstractmethod
    def create(self, user_id: int) -> LoginSession:
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[LoginSession]:
        pass

    @abstractmethod
    def delete(self, session_id: str) -> None:
        pass

    @abstractmethod
    def cleanup_expired(self) -> int:
        pass


class MemorySessionStore(SessionStore):
    """
    Process-local session store.

    Sessions do not survive a restart and are not shared between
    processes.
    """

    def __init__(self, ttl_seconds: int = 86400, clock=time.time):
        """
        Initialize session store.

        Args:
            ttl_seconds: Session lifetime
            clock: Callable returning the current time in seconds
        """
        self._sessions: Dict[str, LoginSession] = {}
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, user_id: int) -> LoginSession:
        """
        Open a new session for a user.

        Args:
            user_id: Authenticated user

        Returns:
            Newly created session
        """
        now = self._clock()
        session = LoginSession(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=now + self._ttl,
            created_at=now,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[LoginSession]:
        """
        Look up a live session.

        Expired sessions are evicted on access.

        Args:
            session_id: Session identifier from the cookie

        Returns:
            Session if found and not expired, None otherwise
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.is_expired(self._clock()):
                del self._sessions[session_id]
                return None
            return session

    def delete(self, session_id: str) -> None:
        """Invalidate a session. Unknown ids are ignored."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """
        Remove every expired session.

        Returns:
            Number of sessions removed
        """
        now = self._clock()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.info(f"Swept {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


async def sweep_sessions_forever(store: SessionStore, interval_seconds: float) -> None:
    """
    Periodically evict expired sessions until cancelled.

    Args:
        store: Session store to sweep
        interval_seconds: Delay between sweeps
    """
    while True:
        await asyncio.sleep(interval_seconds)
        store.cleanup_expired()


# Global session store instance
_session_store = MemorySessionStore(ttl_seconds=get_settings().auth.SESSION_TTL_SECONDS)


def get_session_store() -> SessionStore:
    """Get global session store instance."""
    return _session_store
