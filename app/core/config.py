"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode (exposes /docs and /redoc). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_sql: Log every SQL statement (sqlalchemy.engine at INFO).
        rate_limit_enabled: Turn slowapi rate limiting on or off.
        rate_limit_default: Rate limit for mutating loan endpoints.
        rate_limit_heavy: Rate limit for the overdue sweep.
        database_url: Explicit SQLAlchemy URL. When unset, a Postgres DSN
            is built from the postgres_* values.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Library API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_sql: bool = False
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    database_url: Optional[str] = "sqlite:///./library.db"
    postgres_user: str = "library_user"
    postgres_password: str = "library_password"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "digital_library"

    def get_database_url(self) -> str:
        """Return the effective database URL.

        Priority:
        1. Explicit `DATABASE_URL`
        2. DSN built from postgres_* values (Docker Compose or local Postgres)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
