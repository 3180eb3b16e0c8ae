"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path

import pytest

from bizdesk.config.settings import StorageSettings
from bizdesk.core.exceptions import DatabaseError
from bizdesk.infrastructure.storage.sqlite.connection import ConnectionPool


@pytest.fixture
async def pool(tmp_path: Path):
    pool = ConnectionPool(tmp_path / "nested" / "pool.db", size=2, acquire_timeout=0.1)
    yield pool
    await pool.close()


class TestConnectionPool:
    def test_from_settings(self, tmp_path: Path):
        storage = StorageSettings(data_dir=tmp_path, pool_size=3, acquire_timeout=2.5)

        pool = ConnectionPool.from_settings(storage)

        assert pool.db_path == tmp_path / "bizdesk.db"
        assert (pool.size, pool.busy_timeout, pool.acquire_timeout) == (3, 30000, 2.5)
        assert not pool.is_open

    async def test_acquire_opens_lazily(self, pool):
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            assert pool.in_use == 1

        assert pool.is_open
        assert pool.in_use == 0
        assert pool.db_path.parent.exists()

    async def test_check_reports_load(self, pool):
        async with pool.acquire():
            health = await pool.check()

        assert health.available
        assert (health.size, health.in_use) == (2, 1)
        assert health.latency_ms is not None

    async def test_exhausted_pool_times_out(self, pool):
        async with pool.acquire(), pool.acquire():
            with pytest.raises(DatabaseError):
                async with pool.acquire():
                    pass

            health = await pool.check()

        assert not health.available
        assert "no free connection" in health.error

    async def test_transaction_rolls_back(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0

    async def test_transaction_rolls_back_on_cancel(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (x INTEGER)")
        started = asyncio.Event()

        async def write_then_hang():
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                started.set()
                await asyncio.sleep(10)

        task = asyncio.create_task(write_then_hang())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0

    async def test_close_resets(self, pool):
        await pool.check()
        await pool.close()

        assert not pool.is_open
        assert pool.in_use == 0
