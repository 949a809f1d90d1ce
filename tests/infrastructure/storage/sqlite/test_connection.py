"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

import followups.infrastructure.storage.sqlite.connection as conn_module
from followups.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_init_defaults(self, temp_db_path: Path):
        """Pool stores path and default sizing."""
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.auto_migrate is True
        assert pool._initialized is False
        assert len(pool._connections) == 0


class TestConnectionPoolInitialize:
    """Tests for ConnectionPool.initialize()."""

    @pytest.mark.asyncio
    async def test_initialize_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    @pytest.mark.asyncio
    async def test_initialize_creates_connections(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=3)
        await pool.initialize()

        assert len(pool._connections) == 3
        assert pool._pool.qsize() == 3
        await pool.close()

    @pytest.mark.asyncio
    async def test_initialize_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        await pool.close()

    @pytest.mark.asyncio
    async def test_initialize_applies_migrations(self, temp_db_path: Path):
        """With auto_migrate the schema exists before the first query."""
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
            )
            tables = {row["name"] for row in await cursor.fetchall()}
        await pool.close()

        assert {"clients", "invoices", "reminders", "notifications"} <= tables

    @pytest.mark.asyncio
    async def test_initialize_without_migrations(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1, auto_migrate=False)
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM sqlite_master WHERE type = 'table'")
            row = await cursor.fetchone()
        await pool.close()

        assert row[0] == 0


class TestConnectionPoolCreateConnection:
    """Tests for connection pragmas."""

    @pytest.mark.asyncio
    async def test_wal_and_foreign_keys(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1, auto_migrate=False)
        conn = await pool._create_connection()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            assert conn.row_factory is aiosqlite.Row
        finally:
            await conn.close()


class TestConnectionPoolAcquire:
    """Tests for ConnectionPool.acquire()."""

    @pytest.mark.asyncio
    async def test_acquire_returns_connection_to_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            assert isinstance(conn, aiosqlite.Connection)
            assert pool._pool.qsize() == 0
        assert pool._pool.qsize() == 1
        await pool.close()

    @pytest.mark.asyncio
    async def test_acquire_blocks_when_pool_exhausted(self, temp_db_path: Path):
        """acquire() blocks when all connections are in use."""
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire() as _conn1:
            with pytest.raises(asyncio.TimeoutError):
                async with asyncio.timeout(0.1):
                    async with pool.acquire() as _conn2:
                        pass

        await pool.close()


class TestConnectionPoolTransaction:
    """Tests for ConnectionPool.transaction()."""

    @pytest.mark.asyncio
    async def test_transaction_commits_on_success(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)

        async with pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO clients (id, user_id, name, created_at) VALUES (?, ?, ?, ?)",
                ("c1", "u1", "Acme", "2025-01-01T00:00:00+00:00"),
            )

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT name FROM clients WHERE id = 'c1'")
            row = await cursor.fetchone()
            assert row["name"] == "Acme"

        await pool.close()

    @pytest.mark.asyncio
    async def test_transaction_rollbacks_on_exception(self, initialized_db: Path):
        pool = ConnectionPool(initialized_db, pool_size=1)

        with pytest.raises(ValueError):
            async with pool.transaction() as conn:
                await conn.execute(
                    "INSERT INTO clients (id, user_id, name, created_at) VALUES (?, ?, ?, ?)",
                    ("c2", "u1", "Rollback", "2025-01-01T00:00:00+00:00"),
                )
                raise ValueError("Force rollback")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM clients WHERE id = 'c2'")
            row = await cursor.fetchone()
            assert row[0] == 0

        await pool.close()


class TestConnectionPoolClose:
    """Tests for ConnectionPool.close()."""

    @pytest.mark.asyncio
    async def test_close_resets_state(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()

        await pool.close()

        assert len(pool._connections) == 0
        assert pool._initialized is False
        assert pool._pool.qsize() == 0

    @pytest.mark.asyncio
    async def test_reopen_after_close(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        await pool.close()

        async with pool.acquire() as conn:
            assert conn is not None
        assert pool._pool.qsize() == 1
        await pool.close()

    @pytest.mark.asyncio
    async def test_close_safe_when_not_initialized(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.close()


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    @pytest.mark.asyncio
    async def test_get_pool_uses_settings(self, mock_settings):
        conn_module._pool = None

        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            pool1 = await get_pool()
            pool2 = await get_pool()

            assert pool1 is pool2
            assert pool1.db_path == mock_settings.storage.db_path
            assert pool1.pool_size == 2

            await close_pool()
            assert conn_module._pool is None

    @pytest.mark.asyncio
    async def test_close_pool_safe_when_none(self):
        conn_module._pool = None
        await close_pool()

    @pytest.mark.asyncio
    async def test_get_transaction_then_connection(self, mock_settings):
        conn_module._pool = None

        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            async with get_transaction() as conn:
                await conn.execute(
                    "INSERT INTO clients (id, user_id, name, created_at) VALUES (?, ?, ?, ?)",
                    ("c3", "u1", "Global", "2025-01-01T00:00:00+00:00"),
                )

            async with get_connection() as conn:
                cursor = await conn.execute("SELECT name FROM clients WHERE id = 'c3'")
                row = await cursor.fetchone()
                assert row["name"] == "Global"

            await close_pool()
