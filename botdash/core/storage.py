"""
Repository interface for dashboard data.

Every backend returns the dataclasses from `botdash.core.entities`
and raises the errors from `botdash.core.errors`, so routes and
services never depend on the storage mechanics.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from botdash.core.entities import AnalyticsRecord, Bot, Command, User


class Storage(ABC):
    """CRUD contract for users, bots, commands and analytics."""

    # User operations

    @abstractmethod
    def create_user(self, username: str, password_hash: str) -> User:
        """Create a user. Raises DuplicateUsernameError if the name is taken."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    # Bot operations

    @abstractmethod
    def create_bot(self, user_id: int, name: str, token: str) -> Bot:
        """Create a bot for a user. New bots are always inactive."""

    @abstractmethod
    def get_bots_by_user(self, user_id: int) -> List[Bot]:
        pass

    @abstractmethod
    def get_bot(self, bot_id: int) -> Optional[Bot]:
        pass

    @abstractmethod
    def update_bot(self, bot_id: int, changes: Dict[str, Any]) -> Bot:
        """Shallow-merge changes into a bot. Raises NotFoundError."""

    @abstractmethod
    def delete_bot(self, bot_id: int) -> bool:
        """Delete a bot together with its commands and analytics."""

    # Command operations

    @abstractmethod
    def create_command(self, bot_id: int, name: str, description: str, code: str) -> Command:
        pass

    @abstractmethod
    def get_commands_by_bot(self, bot_id: int) -> List[Command]:
        pass

    @abstractmethod
    def get_command(self, command_id: int) -> Optional[Command]:
        pass

    @abstractmethod
    def update_command(self, command_id: int, changes: Dict[str, Any]) -> Command:
        """Shallow-merge changes into a command. Raises NotFoundError."""

    @abstractmethod
    def delete_command(self, command_id: int) -> bool:
        pass

    # Analytics operations

    @abstractmethod
    def save_analytics(self, bot_id: int, metrics: Any, timestamp: str) -> AnalyticsRecord:
        pass

    @abstractmethod
    def get_analytics_by_bot(self, bot_id: int) -> List[AnalyticsRecord]:
        """Analytics for a bot, newest timestamp first."""


def strip_protected(changes: Dict[str, Any], protected) -> Dict[str, Any]:
    """Drop keys an update must never overwrite."""
    return {key: value for key, value in changes.items() if key not in protected}
