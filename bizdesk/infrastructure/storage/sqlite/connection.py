"""
SQLite connection pool shared by API handlers and the reminder sweep.

Connections are opened once, in WAL mode with foreign keys enforced, and
lent out through a queue. A checkout that cannot be served within
``acquire_timeout`` raises ``DatabaseError`` so a saturated pool fails a
request or a sweep tick instead of stalling it.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from bizdesk.config import get_logger, get_settings
from bizdesk.config.settings import StorageSettings
from bizdesk.core.exceptions import DatabaseError

logger = get_logger(__name__)

CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


@dataclass
class PoolHealth:
    """Outcome of ``ConnectionPool.check``."""

    available: bool
    size: int
    in_use: int
    latency_ms: float | None = None
    error: str | None = None


class ConnectionPool:
    """Fixed-size pool of aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 10.0,
    ):
        self.db_path = db_path
        self.size = size
        self.busy_timeout = busy_timeout  # ms, SQLite's own lock wait
        self.acquire_timeout = acquire_timeout  # seconds, wait for a free connection

        self._connections: list[aiosqlite.Connection] = []
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._open_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, storage: StorageSettings) -> "ConnectionPool":
        return cls(
            storage.db_path,
            size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
            acquire_timeout=storage.acquire_timeout,
        )

    @property
    def is_open(self) -> bool:
        return bool(self._connections)

    @property
    def in_use(self) -> int:
        return len(self._connections) - self._idle.qsize()

    async def open(self) -> None:
        """Open every connection; a no-op when already open."""
        async with self._open_lock:
            if self._connections:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.size):
                conn = await aiosqlite.connect(self.db_path)
                conn.row_factory = aiosqlite.Row
                for pragma in (*CONNECTION_PRAGMAS, f"PRAGMA busy_timeout={self.busy_timeout}"):
                    await conn.execute(pragma)
                self._connections.append(conn)
                self._idle.put_nowait(conn)

            logger.info("sqlite_pool_opened", db_path=str(self.db_path), size=self.size)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, opening the pool on first use."""
        if not self._connections:
            await self.open()

        try:
            conn = await asyncio.wait_for(self._idle.get(), self.acquire_timeout)
        except TimeoutError:
            logger.error("sqlite_pool_exhausted", size=self.size, timeout=self.acquire_timeout)
            raise DatabaseError(
                "acquire", f"no free connection after {self.acquire_timeout}s"
            ) from None

        try:
            yield conn
        finally:
            # A close() while this was out already discarded it
            if conn in self._connections:
                self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; commit on success, roll back on any error or cancellation."""
        async with self.acquire() as conn:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def check(self) -> PoolHealth:
        """Run a trivial query through the pool and report how busy it is."""
        start = time.perf_counter()
        try:
            async with self.acquire() as conn:
                cursor = await conn.execute("SELECT 1")
                await cursor.fetchone()
        except Exception as e:
            return PoolHealth(available=False, size=self.size, in_use=self.in_use, error=str(e))

        return PoolHealth(
            available=True,
            size=self.size,
            in_use=self.in_use,
            latency_ms=(time.perf_counter() - start) * 1000,
        )

    async def close(self) -> None:
        async with self._open_lock:
            connections, self._connections = self._connections, []
            self._idle = asyncio.Queue()
            for conn in connections:
                await conn.close()
            if connections:
                logger.info("sqlite_pool_closed", size=len(connections))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get the process-wide pool, opening it on first use."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_settings(get_settings().storage)
        await _pool.open()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
