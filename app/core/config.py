from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="OM_", extra="ignore")

    app_name: str = "Order Management API"

    database_url: str = "sqlite+pysqlite:///./orders.db"
    sql_echo: bool = False
    # Seconds a SQLite writer waits on the database lock before failing.
    sqlite_busy_timeout: int = 30

    log_level: str = "INFO"

    default_per_page: int = Field(default=15, ge=1)
    max_per_page: int = Field(default=100, ge=1)
    currency_symbol: str = "$"

    bootstrap_demo_on_startup: bool = False
    demo_seed: int | None = None

    def model_post_init(self, __context) -> None:
        if self.default_per_page > self.max_per_page:
            raise ValueError("OM_DEFAULT_PER_PAGE must not exceed OM_MAX_PER_PAGE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
