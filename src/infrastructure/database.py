"""Database settings, URL helpers, and the shared declarative base."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase

# Backend -> async driver used when no async URL is configured.
_ASYNC_DRIVERS = {
    "sqlite": "aiosqlite",
    "postgresql": "asyncpg",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./repository.db"
    async_database_url: str | None = None
    echo: bool = False
    migrate_on_open: bool = True

    @property
    def async_url(self) -> str:
        return self.async_database_url or to_async_url(self.database_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def to_async_url(url: str) -> str:
    """Return url rewritten to use the async driver for its backend.

    Sync drivers are swapped (``postgresql+psycopg2`` -> ``postgresql+asyncpg``);
    URLs already on the async driver, and backends without a known async
    driver, are returned unchanged.
    """
    parsed = make_url(url)
    backend = parsed.get_backend_name()
    driver = _ASYNC_DRIVERS.get(backend)
    if driver is None or parsed.drivername == f"{backend}+{driver}":
        return url
    return parsed.set(drivername=f"{backend}+{driver}").render_as_string(hide_password=False)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
