"""
Bot API endpoints for CRUD operations on the principal's bots.

Every route is owner-scoped: bots belonging to other users are
never listed and cannot be read, changed or deleted.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from botdash.api.deps import get_current_user, get_owned_bot, get_storage
from botdash.core.entities import Bot, User
from botdash.core.errors import NotFoundError
from botdash.core.storage import Storage
from botdash.services import bot_service


router = APIRouter(prefix="/api/bots", tags=["bots"])


# Request/Response models
class CreateBotRequest(BaseModel):
    """Request model for creating a bot."""
    name: str = Field(..., min_length=1, max_length=100, description="Bot display name")
    token: str = Field(..., min_length=1, description="Discord bot token")


class UpdateBotRequest(BaseModel):
    """Request model for updating a bot. Unknown fields such as id or user_id are ignored."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="New bot name (optional)")
    token: Optional[str] = Field(None, min_length=1, description="New bot token (optional)")
    is_active: Optional[bool] = Field(None, description="Mark the bot active or inactive (optional)")


class BotResponse(BaseModel):
    """Response model for bot data."""
    id: int
    user_id: int
    name: str
    token: str
    is_active: bool

    class Config:
        from_attributes = True


@router.get("", response_model=List[BotResponse])
async def list_bots(
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """List the principal's bots."""
    return storage.get_bots_by_user(user.id)


@router.post("", response_model=BotResponse, status_code=201)
async def create_bot(
    request: CreateBotRequest,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """
    Create a new bot. New bots always start inactive.

    Raises:
        400: Invalid bot data
        401: Not authenticated
    """
    try:
        return bot_service.create_bot(storage, user, request.name, request.token)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{bot_id}", response_model=BotResponse)
async def get_bot(bot: Bot = Depends(get_owned_bot)):
    """
    Get a single bot.

    Raises:
        401: Not authenticated
        403: Bot missing or not owned by the principal
    """
    return bot


@router.patch("/{bot_id}", response_model=BotResponse)
async def update_bot(
    request: UpdateBotRequest,
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Partially update a bot.

    Raises:
        400: Invalid update data
        401: Not authenticated
        403: Bot missing or not owned by the principal
        404: Bot deleted concurrently
    """
    changes = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}
    try:
        return bot_service.update_bot(storage, bot, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{bot_id}", status_code=204)
async def delete_bot(
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Delete a bot together with its commands and analytics.

    Raises:
        401: Not authenticated
        403: Bot missing or not owned by the principal
    """
    try:
        bot_service.delete_bot(storage, bot)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return None
