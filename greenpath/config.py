"""
Environment configuration for GreenPathBookings.

Values come from environment variables (or a local .env file) and are
validated by pydantic-settings.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

envPath = Path(".") / ".env"
load_dotenv(dotenv_path=envPath)


class Settings(BaseSettings):
    APP_NAME: str = "GreenPathBookings API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./greenpath.db"
    DB_ECHO: bool = False
    CREATE_TABLES: bool = True  # dev/test only, production runs alembic

    # Auth
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"


@lru_cache()
def getSettings() -> Settings:
    return Settings()


def configureLogging(level: str = "INFO"):
    """Set up root logging once for the whole process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
