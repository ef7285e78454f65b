"""Runtime configuration for the auth and task services."""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEV_AUTH_SECRET = "skilltrack-dev-secret"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Service settings."""
    database_url: str = "sqlite:///./skilltrack.db"
    repository_backend: str = "sql"
    redis_url: str = "redis://localhost:6379"
    token_store_enabled: bool = True
    access_token_ttl_seconds: int = 900
    refresh_token_ttl_seconds: int = 60 * 60 * 24 * 30
    auth_secret: str = DEV_AUTH_SECRET
    cors_origin: str = "http://localhost:5173"
    cookie_secure: bool = False
    sql_echo: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        settings = cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            repository_backend=os.getenv("REPOSITORY_BACKEND", cls.repository_backend).lower(),
            redis_url=os.getenv("REDIS_URL", cls.redis_url),
            token_store_enabled=_env_bool("TOKEN_STORE_ENABLED", cls.token_store_enabled),
            access_token_ttl_seconds=int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", str(cls.access_token_ttl_seconds))),
            refresh_token_ttl_seconds=int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", str(cls.refresh_token_ttl_seconds))),
            auth_secret=os.getenv("AUTH_SECRET", cls.auth_secret),
            cors_origin=os.getenv("CORS_ORIGIN", cls.cors_origin),
            cookie_secure=_env_bool("COOKIE_SECURE", cls.cookie_secure),
            sql_echo=_env_bool("SQL_ECHO", cls.sql_echo),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
        if settings.repository_backend not in ("sql", "memory"):
            raise ValueError(f"Unsupported REPOSITORY_BACKEND: {settings.repository_backend}")
        if settings.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unsupported LOG_LEVEL: {settings.log_level}")
        if settings.auth_secret == DEV_AUTH_SECRET:
            logger.warning("AUTH_SECRET is not set, using the development secret")
        return settings


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
