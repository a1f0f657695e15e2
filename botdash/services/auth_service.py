"""
Authentication service layer.

Handles registration, login and logout against the storage and
session store. Password hashing is the slow step, so callers on the
event loop should run these functions in a worker thread.
"""

import logging
from typing import Optional, Tuple

from botdash.core.entities import User
from botdash.core.errors import DuplicateUsernameError, InvalidCredentialsError
from botdash.core.passwords import hash_password, verify_password
from botdash.core.sessions import LoginSession, SessionStore
from botdash.core.storage import Storage

logger = logging.getLogger(__name__)


def validate_username(username: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a username. Any non-blank name is accepted.

    Args:
        username: Username to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not username or not username.strip():
        return False, "Username is required"

    return True, None


def register(storage: Storage, sessions: SessionStore, username: str, password: str) -> Tuple[User, LoginSession]:
    """
    Create a new user and log them in.

    Args:
        storage: Data store
        sessions: Session store
        username: Desired username
        password: Plaintext password

    Returns:
        Tuple of (created user, new session)

    Raises:
        ValueError: If the username is blank
        DuplicateUsernameError: If the username is taken
    """
    is_valid, error_message = validate_username(username)
    if not is_valid:
        raise ValueError(error_message)

    if storage.get_user_by_username(username) is not None:
        raise DuplicateUsernameError(username)

    user = storage.create_user(username, hash_password(password))
    session = sessions.create(user.id)
    logger.info(f"Registered user {user.id} ('{user.username}')")
    return user, session


def authenticate(storage: Storage, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Unknown users and wrong passwords fail the same way.

    Raises:
        InvalidCredentialsError: If the pair does not match
    """
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password):
        logger.info(f"Failed login attempt for '{username}'")
        raise InvalidCredentialsError()
    return user


def login(storage: Storage, sessions: SessionStore, username: str, password: str) -> Tuple[User, LoginSession]:
    """
    Authenticate and open a session.

    Returns:
        Tuple of (user, new session)

    Raises:
        InvalidCredentialsError: If the pair does not match
    """
    user = authenticate(storage, username, password)
    return user, sessions.create(user.id)


def logout(sessions: SessionStore, session_id: Optional[str]) -> None:
    """Invalidate a session. Missing or unknown ids are ignored."""
    if session_id:
        sessions.delete(session_id)


def resolve_user(storage: Storage, sessions: SessionStore, session_id: Optional[str]) -> Optional[User]:
    """
    Find the user behind a session id.

    Returns:
        User if the session is live and the user still exists, None otherwise
    """
    if not session_id:
        return None
    session = sessions.get(session_id)
    if session is None:
        return None
    return storage.get_user(session.user_id)
