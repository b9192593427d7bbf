"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - The store connection string comes from DATABASE_URL (never hardcoded secrets)
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults for every non-secret setting so the service boots with no arguments
    - postgresql:// URLs rewritten to postgresql+asyncpg:// for the async engine
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crud_api.core.domain_types import SortOrder


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://crud:crud@db:5432/crud"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Plain postgresql:// URLs need the asyncpg driver suffix."""
        if isinstance(v, str) and v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql://", 1)
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_auto_create: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Listing
    default_page_size: int = 20
    max_page_size: int = 100
    list_batch_size: int = 50
    default_sort_order: SortOrder = SortOrder.ASC

    @model_validator(mode="after")
    def check_page_sizes(self):
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError("default_page_size must be within 1..max_page_size")
        if self.list_batch_size < 1:
            raise ValueError("list_batch_size must be >= 1")
        return self

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
