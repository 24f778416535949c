# sensordash/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (PostgreSQL connection string in production)
      - SESSION_SECRET (signing key for the session cookie)

    Optional:
      - SESSION_BACKEND: "database" (default) or "memory"
      - ENVIRONMENT: "development" turns on per-request logging
    """

    PROJECT_NAME: str = "Sensor Dashboard"

    # Database
    DATABASE_URL: str
    DATABASE_SSLMODE: str | None = None
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # Sessions
    SESSION_SECRET: str
    SESSION_COOKIE_NAME: str = "sensordash_session"
    SESSION_MAX_AGE_DAYS: int = 30
    SESSION_BACKEND: str = "database"

    ENVIRONMENT: str = "production"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Upper bound for /latest/{count} and /data/{count}
    MAX_READINGS_COUNT: int = 10000
    ACCESS_KEY_LENGTH: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
