"""
AssetVault Backend — Database Handle & Session Management
===========================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
Why:   Centralizes all database connection logic in one place.
How:   A `Database` object owns the engine and session factory. The application
       factory builds exactly one and stores it on `app.state.database`; the
       `get_db_session` dependency reads it from there for every request.
Who:   Constructed by `create_app()`; used by route dependencies and tests.
When:  Engine is created with the app; sessions are created per-request.

Why an explicit handle (not a module-level engine):
    Tests build their own Database against a temporary SQLite file and pass it
    to `create_app(database=...)`. Nothing in the request path reaches for
    ambient module state, so two apps in one process never share a pool.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and are only
    passed for network databases. SQLite (aiosqlite) manages its own pool.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from assetvault.config import Settings
from assetvault.exceptions import StoreError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic reads for migrations and tests use for `create_all`.
    """
    pass


class Database:
    """
    Owns the async engine and the session factory.

    Args:
        url:           Async SQLAlchemy URL
        pool_size:     Persistent connections (network databases only)
        max_overflow:  Extra connections for spikes (network databases only)
        pool_pre_ping: Validate connections before use
        echo:          Log every SQL statement
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    async def ping(self) -> None:
        """Run `SELECT 1`. Raises the driver error on failure."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def verify_connection(self, attempts: int = 1, wait: float = 0.0) -> None:
        """
        Probe the database, retrying a bounded number of times.

        What:    Called once from the lifespan before the server accepts traffic.
        Why:     A store connectivity failure at startup is fatal; the retry
                 window only covers the database container starting a few
                 seconds after ours.
        Raises:
            StoreError: every attempt failed
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(wait),
            retry=retry_if_exception_type((SQLAlchemyError, OSError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self.ping()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(
                message="Could not connect to the database",
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e
        logger.info("Database connection established")

    async def create_schema(self) -> None:
        """Create all tables registered on Base.metadata (idempotent)."""
        # Import models so they register with Base before create_all
        from assetvault.models import asset, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database handle
        2. Yields it to the dependants (stores, services)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler

    FastAPI caches this dependency per request, so the auth check and the
    asset handler share one session and one transaction.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
