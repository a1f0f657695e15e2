"""
Database configuration and session management.

This module sets up SQLAlchemy for the SQL storage backend. The
engine is created lazily so the in-memory backend never touches disk.
"""

import logging
import os
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from botdash.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Base class for all models
Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints on SQLite connections."""
    if dbapi_conn.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent folder of a file-based SQLite database."""
    if not database_url.startswith("sqlite:///") or database_url.endswith(":memory:"):
        return
    folder = os.path.dirname(database_url.replace("sqlite:///", "", 1))
    if folder:
        os.makedirs(folder, exist_ok=True)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log SQL statements

    Returns:
        Configured engine
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    _ensure_sqlite_dir(database_url)
    kwargs = {"connect_args": {"check_same_thread": False}}  # Needed for SQLite
    if database_url.endswith(":memory:"):
        # One shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, echo=echo, **kwargs)


def get_session_factory() -> sessionmaker:
    """Get the process-wide session factory, creating the engine on first use."""
    global _engine, _session_factory
    if _session_factory is None:
        _engine = create_db_engine(settings.database.DATABASE_URL, echo=settings.database.ECHO_SQL)
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _session_factory


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialise the database.

    Creates all tables defined in the models if they don't exist.
    """
    # Import all models here so they are registered with Base
    from botdash.models import analytics, bot, command, user  # noqa: F401

    if engine is None:
        get_session_factory()
        engine = _engine

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialised at {engine.url.render_as_string(hide_password=True)}")
