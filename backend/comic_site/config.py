"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache), one instance per process
    - Every setting has a default: a local SQLite file and ./uploads work out of the box
    - upload_url_prefix always starts with "/" and never ends with one

Design Decisions:
    - Catalog sizes (list page, newest list) and the guest poster name are settings,
      passed to SiteController at construction
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./comic_site.db"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # Catalog
    comic_list_page_size: int = Field(25, ge=1, le=500)
    newest_list_size: int = Field(5, ge=1)
    guest_poster: str = Field("guest", min_length=1, max_length=100)

    # Uploads
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_upload_bytes: int = Field(10 * 1024 * 1024, ge=1)

    # API
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=1, le=65535)
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """postgresql:// URLs are rewritten for asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("upload_url_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        return "/" + v.strip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
