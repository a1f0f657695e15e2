"""
Analytics API endpoints.

Analytics records are append-only: they can be recorded and listed,
never changed or removed (except when their bot is deleted).
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from botdash.api.deps import get_owned_bot, get_storage
from botdash.core.entities import Bot
from botdash.core.errors import NotFoundError
from botdash.core.storage import Storage
from botdash.services import bot_service

router = APIRouter(prefix="/api/bots/{bot_id}/analytics", tags=["analytics"])


class RecordAnalyticsRequest(BaseModel):
    """Request model for recording an analytics event."""
    metrics: Any = Field(..., description="Opaque JSON metrics payload (object, array or scalar)")
    timestamp: Optional[str] = Field(None, description="ISO 8601 instant (defaults to now)")


class AnalyticsResponse(BaseModel):
    """Response model for an analytics record."""
    id: int
    bot_id: int
    metrics: Any
    timestamp: str

    class Config:
        from_attributes = True


@router.get("", response_model=List[AnalyticsResponse])
async def list_analytics(
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """List a bot's analytics, newest first."""
    return bot_service.list_analytics(storage, bot)


@router.post("", response_model=AnalyticsResponse, status_code=201)
async def record_analytics(
    request: RecordAnalyticsRequest,
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Append an analytics record for a bot.

    Raises:
        400: Timestamp is not ISO 8601
        401: Not authenticated
        403: Bot missing or not owned by the principal
    """
    try:
        return bot_service.record_analytics(storage, bot, request.metrics, request.timestamp)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
