"""
Entity data structures returned by every storage backend.

Storage implementations hand out these plain dataclasses so that call
sites never depend on how (or whether) the data is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class User:
    """Registered dashboard user. `password` holds the salted hash."""
    id: int
    username: str
    password: str


@dataclass(frozen=True)
class Bot:
    """Discord bot record owned by a single user."""
    id: int
    user_id: int
    name: str
    token: str
    is_active: bool = False


@dataclass(frozen=True)
class Command:
    """Command definition belonging to a bot."""
    id: int
    bot_id: int
    name: str
    description: str
    code: str


@dataclass(frozen=True)
class AnalyticsRecord:
    """Append-only analytics event for a bot."""
    id: int
    bot_id: int
    metrics: Any = field(default_factory=dict)
    timestamp: str = ""


# Fields callers may never overwrite through an update
BOT_PROTECTED_FIELDS = frozenset({"id", "user_id"})
COMMAND_PROTECTED_FIELDS = frozenset({"id", "bot_id"})

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def utc_now_iso() -> str:
    """Current instant as an ISO 8601 string with UTC offset."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse a stored timestamp into an aware datetime.

    Naive values are treated as UTC. Values that cannot be parsed
    map to the oldest representable instant so they sort last in a
    newest-first listing.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid_timestamp(value: str) -> bool:
    """Check a timestamp string parses as ISO 8601."""
    try:
        datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        return False
    return True


def newest_first(records):
    """Sort analytics records by timestamp descending, newest id first on ties."""
    return sorted(records, key=lambda r: (parse_timestamp(r.timestamp), r.id), reverse=True)
