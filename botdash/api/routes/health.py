"""
Health check endpoints.

Provides basic health and status information about the server.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from botdash.api.deps import get_sessions, get_storage
from botdash.config import get_settings
from botdash.core.sessions import SessionStore
from botdash.core.storage import Storage

router = APIRouter()
settings = get_settings()


@router.get("/health")
async def health_check(
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_sessions),
) -> dict:
    """
    Basic health check endpoint.

    Example response:
        {
            "status": "healthy",
            "app_name": "Bot Dashboard",
            "version": "0.1.0",
            "timestamp": "2026-01-01T00:00:00+00:00",
            "storage": "MemStorage",
            "session_store": "MemorySessionStore"
        }
    """
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": type(storage).__name__,
        "session_store": type(sessions).__name__,
    }
