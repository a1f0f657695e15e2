"""
SQLAlchemy storage backend.

Persists dashboard data in any database SQLAlchemy supports (SQLite
by default). Each operation runs in its own short-lived session and
commits before returning.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

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
from botdash.models.analytics import AnalyticsModel
from botdash.models.bot import BotModel
from botdash.models.command import CommandModel
from botdash.models.user import UserModel

logger = logging.getLogger(__name__)

BOT_UPDATABLE_FIELDS = ("name", "token", "is_active")
COMMAND_UPDATABLE_FIELDS = ("name", "description", "code")


def _to_user(row: UserModel) -> User:
    return User(id=row.id, username=row.username, password=row.password)


def _to_bot(row: BotModel) -> Bot:
    return Bot(id=row.id, user_id=row.user_id, name=row.name, token=row.token, is_active=bool(row.is_active))


def _to_command(row: CommandModel) -> Command:
    return Command(id=row.id, bot_id=row.bot_id, name=row.name, description=row.description, code=row.code)


def _to_analytics(row: AnalyticsModel) -> AnalyticsRecord:
    return AnalyticsRecord(id=row.id, bot_id=row.bot_id, metrics=row.metrics, timestamp=row.timestamp)


class SqlStorage(Storage):
    """Storage backed by SQLAlchemy ORM models."""

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize SQL storage.

        Args:
            session_factory: Factory producing sessions bound to an engine
                whose tables already exist (see init_db())
        """
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ===== Users =====

    def create_user(self, username: str, password_hash: str) -> User:
        try:
            with self._session() as db:
                if db.query(UserModel).filter(UserModel.username == username).first():
                    raise DuplicateUsernameError(username)
                row = UserModel(username=username, password=password_hash)
                db.add(row)
                db.flush()
                return _to_user(row)
        except IntegrityError:
            # Lost a race against a concurrent registration
            raise DuplicateUsernameError(username)

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            row = db.get(UserModel, user_id)
            return _to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(UserModel).filter(UserModel.username == username).first()
            return _to_user(row) if row else None

    # ===== Bots =====

    def create_bot(self, user_id: int, name: str, token: str) -> Bot:
        with self._session() as db:
            if db.get(UserModel, user_id) is None:
                raise NotFoundError("User not found")
            row = BotModel(user_id=user_id, name=name, token=token, is_active=False)
            db.add(row)
            db.flush()
            return _to_bot(row)

    def get_bots_by_user(self, user_id: int) -> List[Bot]:
        with self._session() as db:
            rows = db.query(BotModel).filter(BotModel.user_id == user_id).order_by(BotModel.id).all()
            return [_to_bot(row) for row in rows]

    def get_bot(self, bot_id: int) -> Optional[Bot]:
        with self._session() as db:
            row = db.get(BotModel, bot_id)
            return _to_bot(row) if row else None

    def update_bot(self, bot_id: int, changes: Dict[str, Any]) -> Bot:
        with self._session() as db:
            row = db.get(BotModel, bot_id)
            if row is None:
                raise NotFoundError("Bot not found")
            for key, value in strip_protected(changes, BOT_PROTECTED_FIELDS).items():
                if key in BOT_UPDATABLE_FIELDS:
                    setattr(row, key, value)
            db.flush()
            return _to_bot(row)

    def delete_bot(self, bot_id: int) -> bool:
        with self._session() as db:
            row = db.get(BotModel, bot_id)
            if row is None:
                return False
            # ORM cascade removes commands and analytics
            db.delete(row)
            return True

    # ===== Commands =====

    def create_command(self, bot_id: int, name: str, description: str, code: str) -> Command:
        with self._session() as db:
            if db.get(BotModel, bot_id) is None:
                raise NotFoundError("Bot not found")
            row = CommandModel(bot_id=bot_id, name=name, description=description, code=code)
            db.add(row)
            db.flush()
            return _to_command(row)

    def get_commands_by_bot(self, bot_id: int) -> List[Command]:
        with self._session() as db:
            rows = db.query(CommandModel).filter(CommandModel.bot_id == bot_id).order_by(CommandModel.id).all()
            return [_to_command(row) for row in rows]

    def get_command(self, command_id: int) -> Optional[Command]:
        with self._session() as db:
            row = db.get(CommandModel, command_id)
            return _to_command(row) if row else None

    def update_command(self, command_id: int, changes: Dict[str, Any]) -> Command:
        with self._session() as db:
            row = db.get(CommandModel, command_id)
            if row is None:
                raise NotFoundError("Command not found")
            for key, value in strip_protected(changes, COMMAND_PROTECTED_FIELDS).items():
                if key in COMMAND_UPDATABLE_FIELDS:
                    setattr(row, key, value)
            db.flush()
            return _to_command(row)

    def delete_command(self, command_id: int) -> bool:
        with self._session() as db:
            row = db.get(CommandModel, command_id)
            if row is None:
                return False
            db.delete(row)
            return True

    # ===== Analytics =====

    def save_analytics(self, bot_id: int, metrics: Any, timestamp: str) -> AnalyticsRecord:
        with self._session() as db:
            if db.get(BotModel, bot_id) is None:
                raise NotFoundError("Bot not found")
            row = AnalyticsModel(bot_id=bot_id, metrics=metrics, timestamp=timestamp)
            db.add(row)
            db.flush()
            return _to_analytics(row)

    def get_analytics_by_bot(self, bot_id: int) -> List[AnalyticsRecord]:
        with self._session() as db:
            rows = db.query(AnalyticsModel).filter(AnalyticsModel.bot_id == bot_id).all()
            records = [_to_analytics(row) for row in rows]
        return newest_first(records)
