"""
AssetVault Backend — Database Handle & Startup Tests
======================================================

What:  Tests for Database.verify_connection and the application lifespan.

What we test:
    ✅ A reachable database passes the probe
    ✅ An unreachable database is retried a bounded number of times, then StoreError
    ✅ The lifespan re-raises StoreError before the app starts serving
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from assetvault.config import Settings
from assetvault.database import Database
from assetvault.exceptions import StoreError
from assetvault.main import create_app, lifespan

UNREACHABLE_URL = "sqlite+aiosqlite:////nonexistent-assetvault-dir/missing/assetvault.db"


class TestVerifyConnection:

    @pytest.mark.asyncio
    async def test_reachable(self, database):
        await database.verify_connection(attempts=1)

    @pytest.mark.asyncio
    async def test_unreachable_url_raises_store_error(self):
        db = Database(UNREACHABLE_URL)
        try:
            with pytest.raises(StoreError) as exc_info:
                await db.verify_connection(attempts=2, wait=0)
        finally:
            await db.dispose()

        assert exc_info.value.context["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_retries_are_bounded(self):
        db = Database(UNREACHABLE_URL)
        failing_ping = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("refused")))

        with patch.object(db, "ping", failing_ping):
            with pytest.raises(StoreError):
                await db.verify_connection(attempts=2, wait=0)

        assert failing_ping.await_count == 2
        await db.dispose()

    @pytest.mark.asyncio
    async def test_recovers_within_attempts(self):
        db = Database(UNREACHABLE_URL)
        flaky_ping = AsyncMock(side_effect=[OSError("connection refused"), None])

        with patch.object(db, "ping", flaky_ping):
            await db.verify_connection(attempts=3, wait=0)

        assert flaky_ping.await_count == 2
        await db.dispose()


class TestLifespan:

    @pytest.mark.asyncio
    async def test_unreachable_database_aborts_startup(self):
        settings = Settings(
            database_url=UNREACHABLE_URL,
            db_connect_attempts=2,
            db_connect_wait=0,
            jwt_secret="test-secret-that-is-at-least-32-characters",
        )
        app = create_app(settings=settings, database=Database(UNREACHABLE_URL))
        started = False

        # Keep pytest's log capture handlers in place
        with patch("assetvault.main.setup_logging"):
            with pytest.raises(StoreError):
                async with lifespan(app):
                    started = True

        assert started is False
        await app.state.database.dispose()

    @pytest.mark.asyncio
    async def test_reachable_database_starts_and_disposes(self, database):
        settings = Settings(
            database_url=database.url,
            db_create_schema=True,
            jwt_secret="test-secret-that-is-at-least-32-characters",
        )
        app = create_app(settings=settings, database=database)
        dispose = AsyncMock()

        with patch("assetvault.main.setup_logging"), patch.object(database, "dispose", dispose):
            async with lifespan(app):
                dispose.assert_not_awaited()

        dispose.assert_awaited_once()
