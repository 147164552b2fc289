"""Shared pytest fixtures.

Every test gets its own file-backed SQLite database under tmp_path.  A file
(rather than :memory:) lets the sync engine and the aiosqlite engine of one
DataContext see the same data, and lets concurrent sessions really run on
separate connections.
"""

import pytest

from src.infrastructure.context import DataContext
from src.infrastructure.database import Settings
import src.infrastructure.persistence  # noqa: F401  (registers all mappers)


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def context(settings):
    ctx = DataContext(settings)
    yield ctx
    ctx.close()


@pytest.fixture
async def async_context(settings):
    ctx = DataContext(settings)
    yield ctx
    await ctx.aclose()
