"""
Bot Dashboard Server Configuration

This file contains all server-side configurable settings.
Values are read from environment variables when the process starts.
"""

from dataclasses import dataclass, field
from typing import List
import os


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    """Read a comma-separated list from the environment."""
    raw = os.getenv(name)
    if not raw:
        return list(default)
    items = [item.strip() for item in raw.split(",")]
    return [item for item in items if item]


@dataclass
class ServerConfig:
    """Server networking configuration."""
    HOST: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    PORT: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    CORS_ALLOW_ORIGINS: List[str] = field(default_factory=lambda: _env_list(
        "CORS_ALLOW_ORIGINS",
        [
            "http://localhost:5173",  # Vite default port
            "http://localhost:3000",  # Alternative React port
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ],
    ))


@dataclass
class AuthConfig:
    """Session and password settings."""
    SESSION_SECRET: str = field(default_factory=lambda: os.getenv("SESSION_SECRET", "development_secret_key"))
    SESSION_COOKIE_NAME: str = field(default_factory=lambda: os.getenv("SESSION_COOKIE_NAME", "botdash_session"))
    SESSION_COOKIE_SECURE: bool = field(default_factory=lambda: _env_bool("SESSION_COOKIE_SECURE", False))
    SESSION_TTL_SECONDS: int = field(default_factory=lambda: int(os.getenv("SESSION_TTL_SECONDS", "86400")))
    SESSION_SWEEP_INTERVAL_SECONDS: int = field(
        default_factory=lambda: int(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "86400"))
    )

    # scrypt parameters
    SALT_BYTES: int = 16
    KEY_LENGTH: int = 64


@dataclass
class AnalysisConfig:
    """AI code analysis provider settings."""
    OPENAI_API_KEY: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    MODEL: str = field(default_factory=lambda: os.getenv("ANALYSIS_MODEL", "gpt-4o"))
    TIMEOUT_SECONDS: float = field(default_factory=lambda: float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "30")))


@dataclass
class DatabaseConfig:
    """Storage backend configuration."""
    STORAGE_BACKEND: str = field(default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory").strip().lower())
    DATABASE_URL: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./data/botdash.db"))
    ECHO_SQL: bool = field(default_factory=lambda: _env_bool("ECHO_SQL", False))  # Log SQL queries


@dataclass
class LoggingConfig:
    """Logging configuration."""
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO")


@dataclass
class Settings:
    """Main settings container."""
    server: ServerConfig = None
    auth: AuthConfig = None
    analysis: AnalysisConfig = None
    database: DatabaseConfig = None
    logging: LoggingConfig = None

    # Application info
    APP_NAME: str = "Bot Dashboard"
    VERSION: str = "0.1.0"
    DEBUG: bool = field(default_factory=lambda: _env_bool("DEBUG", False))

    def __post_init__(self):
        self.server = self.server or ServerConfig()
        self.auth = self.auth or AuthConfig()
        self.analysis = self.analysis or AnalysisConfig()
        self.database = self.database or DatabaseConfig()
        self.logging = self.logging or LoggingConfig()


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
