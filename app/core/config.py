# app/core/config.py
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (any SQLAlchemy URL: postgresql://, mysql+pymysql://, sqlite://)
      - JWT_SECRET (signs access tokens)
      - JWT_REFRESH_SECRET (signs refresh tokens)

    Optional:
      - FRONTEND_URL / ADMIN_FRONTEND_URL (added to the CORS allow-list)
      - ENVIRONMENT (or NODE_ENV): development | production | test
      - SEED_SAMPLE_DATA: insert sample users/categories/products on startup
      - PORT: listen port for `python -m app.main`
    """

    PROJECT_NAME: str = "Victoria Kids Shop API"
    API_PREFIX: str = "/api"
    PORT: int = 5000

    ENVIRONMENT: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    # Database
    DATABASE_URL: str
    # Appended to postgres URLs only (disable, require, ...)
    DB_SSLMODE: str | None = None
    DB_ECHO: bool = False

    # JWT
    JWT_SECRET: str
    JWT_REFRESH_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    RESET_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS
    FRONTEND_URL: str | None = None
    ADMIN_FRONTEND_URL: str | None = None
    CORS_ALLOW_UNLISTED_IN_PRODUCTION: bool = False

    SEED_SAMPLE_DATA: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
