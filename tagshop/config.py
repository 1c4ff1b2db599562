"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (ledger API key, DB password) come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings are read only at the edge; the engine receives a ShopContext

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - TAGS is a JSON list in the environment, e.g. TAGS='["&6VIP:100", "Legend:500"]'
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///tagshop.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Catalog
    tags: list[str] = []
    display_name_format: str = "{label} {tag}"

    # Ledger
    ledger_enabled: bool = False
    ledger_base_url: str = "http://localhost:8081"
    ledger_api_key: str | None = None
    ledger_timeout_seconds: float = 5.0
    ledger_max_retries: int = 3
    ledger_base_delay_ms: int = 200
    ledger_max_delay_ms: int = 5_000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
