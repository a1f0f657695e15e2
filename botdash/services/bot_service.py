"""
Bot service layer for bot, command and analytics operations.

Handles name validation, ownership checks, update filtering and
analytics timestamps on top of the storage contract.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from botdash.core.entities import AnalyticsRecord, Bot, Command, User, is_valid_timestamp, utc_now_iso
from botdash.core.errors import NotFoundError
from botdash.core.storage import Storage

logger = logging.getLogger(__name__)


def validate_bot_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate bot name format.

    Args:
        name: Bot name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Bot name is required"

    if len(name.strip()) > 100:
        return False, "Bot name must not exceed 100 characters"

    return True, None


def is_owner(bot: Optional[Bot], user: User) -> bool:
    """Check the bot exists and belongs to the user."""
    return bot is not None and bot.user_id == user.id


def create_bot(storage: Storage, user: User, name: str, token: str) -> Bot:
    """
    Create a new bot for a user.

    The bot always starts inactive.

    Raises:
        ValueError: If the name is invalid
    """
    is_valid, error_message = validate_bot_name(name)
    if not is_valid:
        raise ValueError(error_message)

    bot = storage.create_bot(user.id, name.strip(), token)
    logger.info(f"User {user.id} created bot {bot.id} ('{bot.name}')")
    return bot


def update_bot(storage: Storage, bot: Bot, changes: Dict[str, Any]) -> Bot:
    """
    Apply a partial update to a bot.

    Args:
        storage: Data store
        bot: Bot to update (ownership already checked)
        changes: Field values to merge; id and user_id are ignored

    Raises:
        ValueError: If a new name is invalid
        NotFoundError: If the bot vanished
    """
    if "name" in changes:
        is_valid, error_message = validate_bot_name(changes["name"])
        if not is_valid:
            raise ValueError(error_message)
        changes = {**changes, "name": changes["name"].strip()}

    updated = storage.update_bot(bot.id, changes)
    logger.info(f"Updated bot {bot.id} fields: {sorted(changes)}")
    return updated


def delete_bot(storage: Storage, bot: Bot) -> None:
    """Delete a bot and everything hanging off it."""
    if not storage.delete_bot(bot.id):
        raise NotFoundError("Bot not found")
    logger.info(f"Deleted bot {bot.id}")


def get_bot_command(storage: Storage, bot: Bot, command_id: int) -> Command:
    """
    Get a command that belongs to the given bot.

    Raises:
        NotFoundError: If the command is absent or belongs to another bot
    """
    command = storage.get_command(command_id)
    if command is None or command.bot_id != bot.id:
        raise NotFoundError("Command not found")
    return command


def create_command(storage: Storage, bot: Bot, name: str, description: str, code: str) -> Command:
    """Create a command under a bot."""
    command = storage.create_command(bot.id, name, description, code)
    logger.info(f"Created command {command.id} ('{command.name}') for bot {bot.id}")
    return command


def list_commands(storage: Storage, bot: Bot) -> List[Command]:
    """List the commands of a bot."""
    return storage.get_commands_by_bot(bot.id)


def record_analytics(storage: Storage, bot: Bot, metrics: Any, timestamp: Optional[str] = None) -> AnalyticsRecord:
    """
    Append an analytics record for a bot.

    Args:
        storage: Data store
        bot: Owning bot
        metrics: Opaque JSON payload
        timestamp: ISO 8601 instant; defaults to now

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    if timestamp is None:
        timestamp = utc_now_iso()
    elif not is_valid_timestamp(timestamp):
        raise ValueError(f"Invalid timestamp: {timestamp!r}")

    return storage.save_analytics(bot.id, metrics, timestamp)


def list_analytics(storage: Storage, bot: Bot) -> List[AnalyticsRecord]:
    """Analytics for a bot, newest first."""
    return storage.get_analytics_by_bot(bot.id)
