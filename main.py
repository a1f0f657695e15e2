"""
Bot Dashboard FastAPI Application

Main entry point for the Discord bot dashboard server.
Configures FastAPI with CORS, signed session cookies, routes and the
background session sweeper.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from botdash.api.deps import get_sessions, get_storage
from botdash.api.routes import analysis, analytics, auth, bots, commands, health
from botdash.config import get_settings
from botdash.core.sessions import sweep_sessions_forever

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.logging.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Handles:
    - Storage backend initialisation on startup
    - Periodic sweep of expired sessions
    - Cleanup on shutdown
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    get_storage()
    sweeper = asyncio.create_task(
        sweep_sessions_forever(get_sessions(), settings.auth.SESSION_SWEEP_INTERVAL_SECONDS)
    )
    logger.info(f"Server ready on {settings.server.HOST}:{settings.server.PORT}")

    yield

    # Shutdown
    logger.info("Shutting down server...")
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Dashboard for managing Discord bots, their commands and analytics",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.auth.SESSION_SECRET,
    session_cookie=settings.auth.SESSION_COOKIE_NAME,
    max_age=settings.auth.SESSION_TTL_SECONDS,
    same_site="lax",
    https_only=settings.auth.SESSION_COOKIE_SECURE,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(auth.router)
app.include_router(bots.router)
app.include_router(commands.router)
app.include_router(analytics.router)
app.include_router(analysis.router)


@app.get("/")
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API information.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.server.HOST, port=settings.server.PORT)


if __name__ == "__main__":
    run()
