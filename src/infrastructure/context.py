"""Data context: engine ownership and the per-operation session factory.

A DataContext is long-lived; the sessions it hands out are not.  Every
repository call asks for a fresh Session (or AsyncSession), uses it for one
operation and closes it, so no two calls ever share change-tracking state.

Schema migration happens lazily the first time a session is requested
(migrate_on_open).  With an Alembic Config the context runs
``alembic upgrade head``; without one it falls back to metadata.create_all,
which is what the test-suite relies on.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Engine, MetaData, create_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session, sessionmaker

from src.infrastructure.database import Base, Settings, get_settings

logger = logging.getLogger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


def alembic_config(url: str | None = None, script_location: Path = ALEMBIC_DIR) -> Config:
    """Build an Alembic Config for the bundled migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(script_location))
    if url is not None:
        cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


class DataContext:
    """Factory for independent units of work against one database."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        migrations: Config | None = None,
        metadata: MetaData | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.migrations = migrations
        self.metadata = metadata if metadata is not None else Base.metadata

        self._engine: Engine | None = None
        self._async_engine: AsyncEngine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None

        self._migrated = False
        self._migrate_lock = threading.Lock()
        self._async_migrate_lock: asyncio.Lock | None = None

    # --- engines ---

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(
                self.settings.database_url,
                echo=self.settings.echo,
                pool_pre_ping=True,
            )
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._engine

    @property
    def async_engine(self) -> AsyncEngine:
        if self._async_engine is None:
            self._async_engine = create_async_engine(
                self.settings.async_url,
                echo=self.settings.echo,
                pool_pre_ping=True,
            )
            self._async_session_factory = async_sessionmaker(
                bind=self._async_engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._async_engine

    @property
    def migrated(self) -> bool:
        return self._migrated

    # --- units of work ---

    def create_instance(self) -> Session:
        """Return a new, independent Session.  The caller must close it."""
        engine = self.engine
        if self.settings.migrate_on_open:
            self.migrate()
        assert self._session_factory is not None
        logger.debug("Opening session on %s", engine.url.render_as_string())
        return self._session_factory()

    async def create_async_instance(self) -> AsyncSession:
        """Return a new, independent AsyncSession.  The caller must close it."""
        engine = self.async_engine
        if self.settings.migrate_on_open:
            await self.migrate_async()
        assert self._async_session_factory is not None
        logger.debug("Opening async session on %s", engine.url.render_as_string())
        return self._async_session_factory()

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self.create_instance() as session:
            yield session

    @asynccontextmanager
    async def async_session(self) -> AsyncIterator[AsyncSession]:
        session = await self.create_async_instance()
        async with session:
            yield session

    # --- schema ---

    def migrate(self) -> None:
        """Bring the schema up to date.  Runs at most once per context."""
        with self._migrate_lock:
            if self._migrated:
                return
            if self.migrations is not None:
                self._upgrade_head()
            else:
                logger.info("Creating missing tables on %s", self.engine.url.render_as_string())
                self.metadata.create_all(self.engine)
            self._run_seed()
            self._migrated = True

    async def migrate_async(self) -> None:
        """Async counterpart of migrate(); DDL runs on the async engine."""
        if self._migrated:
            return
        if self._async_migrate_lock is None:
            self._async_migrate_lock = asyncio.Lock()
        async with self._async_migrate_lock:
            if self._migrated:
                return
            if self.migrations is not None:
                # env.py drives its own event loop, so keep it off ours.
                await asyncio.to_thread(self.migrate)
                return
            logger.info(
                "Creating missing tables on %s", self.async_engine.url.render_as_string()
            )
            async with self.async_engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all)
            async with AsyncSession(self.async_engine, expire_on_commit=False) as session:
                await session.run_sync(self.seed)
                await session.commit()
            self._migrated = True

    def seed(self, session: Session) -> None:
        """Populate reference data after the first migration.  No-op by default."""

    def _upgrade_head(self) -> None:
        assert self.migrations is not None
        if not self.migrations.get_main_option("sqlalchemy.url"):
            self.migrations.set_main_option(
                "sqlalchemy.url", self.settings.async_url.replace("%", "%%")
            )
        logger.info("Running alembic upgrade head")
        command.upgrade(self.migrations, "head")

    def _run_seed(self) -> None:
        with Session(self.engine, expire_on_commit=False) as session:
            self.seed(session)
            session.commit()

    # --- lifetime ---

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    async def aclose(self) -> None:
        if self._async_engine is not None:
            await self._async_engine.dispose()
            self._async_engine = None
        self.close()

    def __enter__(self) -> DataContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        self.close()

    async def __aenter__(self) -> DataContext:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.aclose()
