"""
Authentication API endpoints.

Registration, login, logout and the current-user lookup. The session
id travels in a cookie signed by SessionMiddleware; the session
itself lives in the server-side session store.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from botdash.api.deps import SESSION_KEY, get_current_user, get_sessions, get_storage
from botdash.core.entities import User
from botdash.core.errors import DuplicateUsernameError, InvalidCredentialsError
from botdash.core.sessions import SessionStore
from botdash.core.storage import Storage
from botdash.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


# Request/Response models
class RegisterRequest(BaseModel):
    """Request model for registration."""
    username: str = Field(..., min_length=1, max_length=50, description="Username")
    password: str = Field(..., min_length=1, max_length=256, description="Plaintext password")


class LoginRequest(BaseModel):
    """Request model for login. No length limits, so every failed attempt answers 401."""
    username: str
    password: str


class UserResponse(BaseModel):
    """Response model for user data. Never includes the password hash."""
    id: int
    username: str

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


def _start_session(request: Request, sessions: SessionStore, session_id: str) -> None:
    """Bind a new session to the cookie, dropping any previous one."""
    auth_service.logout(sessions, request.session.get(SESSION_KEY))
    request.session.clear()
    request.session[SESSION_KEY] = session_id


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    body: RegisterRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_sessions),
):
    """
    Register a new user and log them in.

    Raises:
        400: Username taken or invalid
    """
    try:
        user, session = await run_in_threadpool(
            auth_service.register, storage, sessions, body.username, body.password
        )
    except (DuplicateUsernameError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    _start_session(request, sessions, session.session_id)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_sessions),
):
    """
    Log in with username and password.

    Raises:
        401: Invalid credentials
    """
    try:
        user, session = await run_in_threadpool(
            auth_service.login, storage, sessions, body.username, body.password
        )
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    _start_session(request, sessions, session.session_id)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, sessions: SessionStore = Depends(get_sessions)):
    """Invalidate the current session. Safe to call when logged out."""
    auth_service.logout(sessions, request.session.get(SESSION_KEY))
    request.session.clear()
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(get_current_user)):
    """
    Get the logged-in user.

    Raises:
        401: Not authenticated
    """
    return user
