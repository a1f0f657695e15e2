"""
Command API endpoints, nested under an owned bot.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from botdash.api.deps import get_owned_bot, get_storage
from botdash.core.entities import Bot
from botdash.core.errors import NotFoundError
from botdash.core.storage import Storage
from botdash.services import bot_service


router = APIRouter(prefix="/api/bots/{bot_id}/commands", tags=["commands"])


class CreateCommandRequest(BaseModel):
    """Request model for creating a command."""
    name: str = Field(..., min_length=1, max_length=100, description="Command trigger, e.g. !ping")
    description: str = Field(..., description="What the command does")
    code: str = Field(..., description="Command source code")


class UpdateCommandRequest(BaseModel):
    """Request model for updating a command."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    code: Optional[str] = None


class CommandResponse(BaseModel):
    """Response model for command data."""
    id: int
    bot_id: int
    name: str
    description: str
    code: str

    class Config:
        from_attributes = True


@router.get("", response_model=List[CommandResponse])
async def list_commands(
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """List a bot's commands."""
    return bot_service.list_commands(storage, bot)


@router.post("", response_model=CommandResponse, status_code=201)
async def create_command(
    request: CreateCommandRequest,
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Create a command for a bot.

    Raises:
        401: Not authenticated
        403: Bot missing or not owned by the principal
    """
    try:
        return bot_service.create_command(storage, bot, request.name, request.description, request.code)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{command_id}", response_model=CommandResponse)
async def update_command(
    command_id: int,
    request: UpdateCommandRequest,
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Partially update a command.

    Raises:
        404: Command not found under this bot
    """
    changes = {key: value for key, value in request.model_dump(exclude_unset=True).items() if value is not None}
    try:
        command = bot_service.get_bot_command(storage, bot, command_id)
        return storage.update_command(command.id, changes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{command_id}", status_code=204)
async def delete_command(
    command_id: int,
    bot: Bot = Depends(get_owned_bot),
    storage: Storage = Depends(get_storage),
):
    """
    Delete a command.

    Raises:
        404: Command not found under this bot
    """
    try:
        command = bot_service.get_bot_command(storage, bot, command_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    storage.delete_command(command.id)
    return None
