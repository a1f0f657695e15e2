"""
In-memory storage backend.

Holds every entity in process-local dicts keyed by id. Suitable for
tests and small single-process deployments; nothing is persisted.
"""

import copy
import itertools
import logging
import threading
from dataclasses import fields, replace
from typing import Any, Dict, List, Optional

from botdash.core.entities import (
    AnalyticsRecord,
    Bot,
    BOT_PROTECTED_FIELDS,
    Command,
    COMMAND_PROTECTED_FIELDS,
    User,
    newest_first,
)
from botdash.core.errors import DuplicateUsernameError, NotFoundError
from botdash.core.storage import Storage, strip_protected

logger = logging.getLogger(__name__)


def _known_fields(entity_cls, changes: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(entity_cls)}
    return {key: value for key, value in changes.items() if key in names}


class MemStorage(Storage):
    """
    Dict-backed storage.

    Each public operation holds a single lock, so it is atomic with
    respect to itself. Concurrent updates are last-write-wins.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._users: Dict[int, User] = {}
        self._bots: Dict[int, Bot] = {}
        self._commands: Dict[int, Command] = {}
        self._analytics: Dict[int, AnalyticsRecord] = {}
        self._ids = {
            "users": itertools.count(1),
            "bots": itertools.count(1),
            "commands": itertools.count(1),
            "analytics": itertools.count(1),
        }
        self._lock = threading.RLock()

    # ===== Users =====

    def create_user(self, username: str, password_hash: str) -> User:
        with self._lock:
            if self._find_user(username) is not None:
                raise DuplicateUsernameError(username)
            user = User(id=next(self._ids["users"]), username=username, password=password_hash)
            self._users[user.id] = user
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return self._find_user(username)

    def _find_user(self, username: str) -> Optional[User]:
        # Linear scan; fine at dashboard scale
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    # ===== Bots =====

    def create_bot(self, user_id: int, name: str, token: str) -> Bot:
        with self._lock:
            if user_id not in self._users:
                raise NotFoundError("User not found")
            bot = Bot(id=next(self._ids["bots"]), user_id=user_id, name=name, token=token, is_active=False)
            self._bots[bot.id] = bot
            return bot

    def get_bots_by_user(self, user_id: int) -> List[Bot]:
        with self._lock:
            return [bot for bot in self._bots.values() if bot.user_id == user_id]

    def get_bot(self, bot_id: int) -> Optional[Bot]:
        return self._bots.get(bot_id)

    def update_bot(self, bot_id: int, changes: Dict[str, Any]) -> Bot:
        with self._lock:
            bot = self._bots.get(bot_id)
            if bot is None:
                raise NotFoundError("Bot not found")
            changes = _known_fields(Bot, strip_protected(changes, BOT_PROTECTED_FIELDS))
            updated = replace(bot, **changes)
            self._bots[bot_id] = updated
            return updated

    def delete_bot(self, bot_id: int) -> bool:
        with self._lock:
            if self._bots.pop(bot_id, None) is None:
                return False

            orphaned_commands = [cid for cid, c in self._commands.items() if c.bot_id == bot_id]
            for cid in orphaned_commands:
                del self._commands[cid]

            orphaned_analytics = [aid for aid, a in self._analytics.items() if a.bot_id == bot_id]
            for aid in orphaned_analytics:
                del self._analytics[aid]

            logger.debug(
                f"Deleted bot {bot_id} with {len(orphaned_commands)} commands "
                f"and {len(orphaned_analytics)} analytics records"
            )
            return True

    # ===== Commands =====

    def create_command(self, bot_id: int, name: str, description: str, code: str) -> Command:
        with self._lock:
            if bot_id not in self._bots:
                raise NotFoundError("Bot not found")
            command = Command(
                id=next(self._ids["commands"]),
                bot_id=bot_id,
                name=name,
                description=description,
                code=code,
            )
            self._commands[command.id] = command
            return command

    def get_commands_by_bot(self, bot_id: int) -> List[Command]:
        with self._lock:
            return [cmd for cmd in self._commands.values() if cmd.bot_id == bot_id]

    def get_command(self, command_id: int) -> Optional[Command]:
        return self._commands.get(command_id)

    def update_command(self, command_id: int, changes: Dict[str, Any]) -> Command:
        with self._lock:
            command = self._commands.get(command_id)
            if command is None:
                raise NotFoundError("Command not found")
            changes = _known_fields(Command, strip_protected(changes, COMMAND_PROTECTED_FIELDS))
            updated = replace(command, **changes)
            self._commands[command_id] = updated
            return updated

    def delete_command(self, command_id: int) -> bool:
        with self._lock:
            return self._commands.pop(command_id, None) is not None

    # ===== Analytics =====

    def save_analytics(self, bot_id: int, metrics: Any, timestamp: str) -> AnalyticsRecord:
        with self._lock:
            if bot_id not in self._bots:
                raise NotFoundError("Bot not found")
            record = AnalyticsRecord(
                id=next(self._ids["analytics"]),
                bot_id=bot_id,
                metrics=copy.deepcopy(metrics),
                timestamp=timestamp,
            )
            self._analytics[record.id] = record
            return record

    def get_analytics_by_bot(self, bot_id: int) -> List[AnalyticsRecord]:
        with self._lock:
            records = [a for a in self._analytics.values() if a.bot_id == bot_id]
        return newest_first(records)
