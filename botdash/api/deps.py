"""
FastAPI dependencies shared by the route modules.

Provides the storage backend, session store, code analyzer and the
authenticated principal. Tests swap any of them through
`app.dependency_overrides`.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request

from botdash.config import get_settings
from botdash.core.entities import Bot, User
from botdash.core.memory_storage import MemStorage
from botdash.core.sessions import SessionStore, get_session_store
from botdash.core.storage import Storage
from botdash.services import auth_service, bot_service
from botdash.services.analysis_service import CodeAnalyzer, create_analyzer

logger = logging.getLogger(__name__)

# Key under which the signed session cookie stores the session id
SESSION_KEY = "sid"

_storage: Optional[Storage] = None
_analyzer: Optional[CodeAnalyzer] = None


def create_storage() -> Storage:
    """
    Build the storage backend named by STORAGE_BACKEND.

    Raises:
        ValueError: For an unknown backend name
    """
    backend = get_settings().database.STORAGE_BACKEND
    if backend == "memory":
        return MemStorage()
    if backend == "sql":
        from botdash.core.sql_storage import SqlStorage
        from botdash.database import get_session_factory, init_db

        init_db()
        return SqlStorage(get_session_factory())
    raise ValueError(f"Unknown storage backend: {backend!r} (expected 'memory' or 'sql')")


def get_storage() -> Storage:
    """Get the process-wide storage backend."""
    global _storage
    if _storage is None:
        _storage = create_storage()
        logger.info(f"Using {type(_storage).__name__} storage backend")
    return _storage


def get_sessions() -> SessionStore:
    """Get the session store."""
    return get_session_store()


def get_analyzer() -> CodeAnalyzer:
    """Get the process-wide code analyzer."""
    global _analyzer
    if _analyzer is None:
        _analyzer = create_analyzer()
    return _analyzer


def get_current_user(
    request: Request,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_sessions),
) -> User:
    """
    Resolve the authenticated principal for a request.

    Raises:
        401: No session, expired session, or the user no longer exists
    """
    user = auth_service.resolve_user(storage, sessions, request.session.get(SESSION_KEY))
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_owned_bot(
    bot_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
) -> Bot:
    """
    Load a bot from the path and check the principal owns it.

    Missing and foreign bots both answer 403 so ids cannot be probed.

    Raises:
        401: Not authenticated
        403: Bot missing or owned by another user
    """
    bot = storage.get_bot(bot_id)
    if not bot_service.is_owner(bot, user):
        raise HTTPException(status_code=403, detail="Forbidden")
    return bot
