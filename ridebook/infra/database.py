# ridebook/infra/database.py
"""
asyncpg pool shared by the whole process.

Repositories accept an optional connection so that a service can run several
of their calls inside one ``transaction()``; without one they borrow a
connection from the pool for the duration of the call.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, AsyncGenerator, Callable, TypeVar

import asyncpg
from asyncpg import Connection, Pool

from ridebook.common.constants import TypeMsg
from ridebook.common.logger import log_error, log_info

T = TypeVar("T")

# Arbitrary key for the schema-migration advisory lock
SCHEMA_LOCK_KEY = 730412209

# Failures worth another attempt; query errors are not among them
CONNECTION_ERRORS = (
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    ConnectionRefusedError,
    OSError,
)


def retry_on_connection_error(
    max_attempts: int = 3,
    delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Re-runs a coroutine after a lost or refused connection, waiting
    ``delay * attempt`` seconds between tries. The last error is re-raised.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except CONNECTION_ERRORS as e:
                    if attempt >= max_attempts:
                        await log_error(f"{func.__name__}: database unreachable after {attempt} attempts: {e}")
                        raise
                    await log_info(
                        f"{func.__name__}: connection error, retrying ({attempt}/{max_attempts}): {e}",
                        type_msg=TypeMsg.WARNING,
                    )
                    await asyncio.sleep(delay * attempt)
                    attempt += 1

        return wrapper  # type: ignore[return-value]

    return decorator


class DatabaseManager:
    """Singleton owner of the asyncpg pool."""

    _instance: DatabaseManager | None = None
    _pool: Pool | None = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._pool = None
        return cls._instance

    @property
    def pool(self) -> Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not initialized; call connect() first")
        return self._pool

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @retry_on_connection_error()
    async def connect(
        self,
        dsn: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
        command_timeout: float | None = None,
    ) -> None:
        """
        Opens the pool. Arguments left as None come from ``settings.database``.
        A second call while connected does nothing.
        """
        if self._pool is not None:
            return

        from ridebook.config import settings

        db_settings = settings.database
        self._pool = await asyncpg.create_pool(
            dsn=dsn or db_settings.dsn,
            min_size=db_settings.DB_MIN_POOL_SIZE if min_size is None else min_size,
            max_size=db_settings.DB_MAX_POOL_SIZE if max_size is None else max_size,
            command_timeout=db_settings.DB_COMMAND_TIMEOUT if command_timeout is None else command_timeout,
        )
        await log_info("PostgreSQL pool created", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        await log_info("PostgreSQL pool closed", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Connection, None]:
        async with self.pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Connection, None]:
        """
        One connection, one transaction: committed when the block exits
        normally, rolled back (and the exception re-raised) otherwise.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    @asynccontextmanager
    async def connection(self, conn: Connection | None = None) -> AsyncGenerator[Connection, None]:
        """Yields ``conn`` if given, else a connection borrowed from the pool."""
        if conn is not None:
            yield conn
            return
        async with self.acquire() as borrowed:
            yield borrowed

    @retry_on_connection_error()
    async def fetchval(self, query: str, *args: Any, column: int = 0) -> Any:
        """Single value from a pooled connection; used by health_check."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column)

    async def health_check(self) -> bool:
        """True when the pool answers ``SELECT 1``; failures are logged, not raised."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except Exception as e:
            await log_error(f"PostgreSQL health check failed: {e}")
            return False


def get_db() -> DatabaseManager:
    return DatabaseManager()


async def init_db() -> None:
    """Opens the pool from settings and brings the schema up to date."""
    from ridebook.config import settings

    db = get_db()
    await db.connect()
    await log_info(
        f"PostgreSQL connected: {settings.database.DB_HOST}:{settings.database.DB_PORT}/{settings.database.DB_NAME}",
        type_msg=TypeMsg.INFO,
    )
    await _init_schema(db)


async def _init_schema(db: DatabaseManager) -> None:
    from ridebook.config.loader import get_project_root

    schema_path = get_project_root() / "migrations" / "init.sql"
    if not schema_path.exists():
        await log_error(f"Schema file not found: {schema_path}")
        return

    # Several workers may start at once; the lock serializes the DDL
    async with db.transaction() as conn:
        await conn.execute("SELECT pg_advisory_xact_lock($1)", SCHEMA_LOCK_KEY)
        await conn.execute(schema_path.read_text(encoding="utf-8"))

    await log_info(f"Database schema applied from {schema_path.name}", type_msg=TypeMsg.INFO)


async def close_db() -> None:
    await get_db().disconnect()
