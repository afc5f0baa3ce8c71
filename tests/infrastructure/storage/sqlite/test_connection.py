"""Unit tests for SQLite connection pool."""

from pathlib import Path

import aiosqlite
import pytest

from partsledger.config import reset_settings
from partsledger.core.exceptions import ConcurrencyConflictError, DatabaseError
from partsledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    is_lock_error,
    map_storage_error,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert len(pool._connections) == 0


class TestConnectionPoolInitialize:
    async def test_initialize_creates_directory(self, tmp_path: Path):
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        await pool.close()

    async def test_connections_enforce_foreign_keys(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            row = await cursor.fetchone()
            assert row[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            row = await cursor.fetchone()
            assert row[0] == "wal"
        await pool.close()

    async def test_close_then_reuse(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        await pool.close()

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()


class TestTransaction:
    @pytest.fixture
    async def table_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=100)
        async with pool.acquire() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
        yield pool
        await pool.close()

    async def count(self, pool: ConnectionPool) -> int:
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            return (await cursor.fetchone())[0]

    async def test_commits_on_success(self, table_pool: ConnectionPool):
        async with table_pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")

        assert await self.count(table_pool) == 1

    async def test_rolls_back_on_exception(self, table_pool: ConnectionPool):
        with pytest.raises(RuntimeError):
            async with table_pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        assert await self.count(table_pool) == 0

    async def test_sqlite_errors_become_database_errors(self, table_pool: ConnectionPool):
        with pytest.raises(DatabaseError):
            async with table_pool.transaction() as conn:
                await conn.execute("INSERT INTO missing VALUES (1)")

    async def test_second_writer_gets_concurrency_conflict(self, table_pool: ConnectionPool):
        async with table_pool.transaction() as conn:
            await conn.execute("INSERT INTO t VALUES (1)")
            with pytest.raises(ConcurrencyConflictError):
                async with table_pool.transaction():
                    pass

    async def test_reader_sees_snapshot_while_writer_holds_lock(self, table_pool: ConnectionPool):
        async with table_pool.transaction() as writer:
            await writer.execute("INSERT INTO t VALUES (1)")
            async with table_pool.transaction(immediate=False) as reader:
                cursor = await reader.execute("SELECT COUNT(*) FROM t")
                assert (await cursor.fetchone())[0] == 0


class TestErrorMapping:
    def test_lock_error_detection(self):
        assert is_lock_error(aiosqlite.OperationalError("database is locked"))
        assert not is_lock_error(aiosqlite.OperationalError("no such table: t"))
        assert not is_lock_error(ValueError("locked"))

    def test_map_storage_error(self):
        assert isinstance(
            map_storage_error("x", aiosqlite.OperationalError("database is busy")),
            ConcurrencyConflictError,
        )
        assert isinstance(
            map_storage_error("x", aiosqlite.IntegrityError("CHECK constraint failed")),
            DatabaseError,
        )


class TestGlobalPool:
    async def test_global_pool_uses_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "global"))
        reset_settings()

        pool = await get_pool()
        try:
            assert pool.db_path == tmp_path / "global" / "partsledger.db"
            assert await get_pool() is pool

            async with get_transaction() as conn:
                await conn.execute("CREATE TABLE g (v INTEGER)")
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM g")
                assert (await cursor.fetchone())[0] == 0
        finally:
            await close_pool()
