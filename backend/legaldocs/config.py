# @TASK S0-T0.2 - pydantic-settings based application settings

import re
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Settings(BaseSettings):
    """Legal document search service settings.

    All values are loaded from environment variables.
    A .env file in the backend directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Database ---
    DATABASE_URL: str = "postgresql+asyncpg://legaldocs:legaldocs@db:5432/legaldocs"
    DATABASE_ECHO: bool = False
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # --- Full-text search ---
    FTS_CONFIG: str = "arabic"  # PostgreSQL text search configuration used by to_tsquery

    # --- Paging ---
    SEARCH_DEFAULT_PAGE_SIZE: int = 10
    SEARCH_MAX_PAGE_SIZE: int = 100
    SIMPLE_SEARCH_PAGE_SIZE: int = 50

    # --- Ranking / snippet overrides (JSON object, see search.params) ---
    SEARCH_PARAMS: dict[str, Any] = {}

    # --- CORS ---
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("FTS_CONFIG")
    @classmethod
    def _check_fts_config(cls, value: str) -> str:
        # Rendered inline as a regconfig literal, so only plain identifiers are accepted
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Invalid text search configuration name: {value!r}")
        return value

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver."""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
