"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All credentials come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), one instance per process
    - database_url is always an async driver URL (postgresql+asyncpg or aiosqlite)

Design Decisions:
    - DATABASE_URL overrides the individual DB_* parts when both are present
    - NODE_ENV accepted as an alias of ENVIRONMENT for existing deployments
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Database
    db_user: str = "postgres"
    db_password: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "postgres"
    database_url_override: str | None = Field(
        default=None, validation_alias="DATABASE_URL",
    )

    @field_validator("database_url_override", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Plain postgresql:// URLs need the asyncpg driver suffix."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v or None

    # Pool
    db_pool_max: int = Field(default=10, ge=1)
    db_idle_timeout: float = Field(default=30.0, gt=0)
    db_connect_timeout: float = Field(default=2.0, gt=0)
    db_pool_timeout: float = Field(default=30.0, gt=0)

    # Deployment metadata
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )
    hostname: str = "unknown"
    app_name: str = "K8s Multi-Tier API - NAGP 2025 Assignment"
    app_version: str = "1.0.0"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
