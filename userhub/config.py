"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - resolved_database_url() always yields an async driver URL

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - DATABASE_URL wins when set; otherwise the URL is assembled from DB_* parts
      so docker-compose style host/port/user variables keep working
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "boilerplate_db"
    database_driver: str = "postgresql+asyncpg"
    database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str | None) -> str | None:
        """Hosting platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v or None

    database_pool_size: int = 10
    database_max_overflow: int = 0
    # None = queued callers wait for a free connection instead of failing
    database_pool_timeout: float | None = None
    database_create_tables: bool = True

    # API
    cors_origins: list[str] = ["*"]
    socket_cors_origin: str = "http://localhost:3000"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return URL.create(
            self.database_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()
