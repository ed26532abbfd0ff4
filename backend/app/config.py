"""Centralizes environment-driven application settings."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dept_roster.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT / session transport
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    SESSION_COOKIE_NAME: str = "session"
    # Clients that keep the session in local storage send it here instead of a cookie.
    FALLBACK_SESSION_HEADER: str = "X-Fallback-Cookies"

    NOTIFICATIONS_ENABLED: bool = True
    ROSTER_EXCLUDED_ROLES: List[str] = ["super_admin"]

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
