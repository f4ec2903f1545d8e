"""
PostgreSQL connection pool, request unit of work and readiness probe.

The pool is created once at startup and handed to the app through
``app.state``. Each request borrows one connection and runs all of its
store calls inside a single transaction on it, exposed to repositories
through a pool-shaped ``ConnectionScope``.
"""

import asyncpg
import structlog
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List

from api.src.config import Settings

logger = structlog.get_logger(__name__)


async def init_db_pool(settings: Settings) -> asyncpg.Pool:
    """
    Initialize database connection pool.

    Should be called during application startup.

    Args:
        settings: Application settings

    Returns:
        asyncpg connection pool
    """
    try:
        pool = await asyncpg.create_pool(
            settings.database_dsn,
            min_size=settings.pool_min_size,
            max_size=settings.postgres_max_connections,
            command_timeout=settings.postgres_command_timeout
        )

        logger.info(
            "database_pool_initialized",
            host=settings.postgres_host,
            database=settings.postgres_database,
            min_size=settings.pool_min_size,
            max_size=settings.postgres_max_connections
        )

        return pool

    except Exception as e:
        logger.error(
            "database_pool_init_failed",
            error=str(e),
            host=settings.postgres_host,
            database=settings.postgres_database
        )
        raise


async def close_db_pool(pool: asyncpg.Pool) -> None:
    """
    Close database connection pool.

    Should be called during application shutdown.
    """
    await pool.close()
    logger.info("database_pool_closed")


class ConnectionScope:
    """
    Pool-shaped view over a single borrowed connection.

    Lets repositories written against ``pool.acquire()`` share the
    request's connection, and therefore its transaction. Callbacks
    registered with ``after_commit`` run once the transaction has committed
    and are dropped on rollback.
    """

    def __init__(self, conn: asyncpg.Connection):
        self._conn = conn
        self._commit_callbacks: List[Callable[[], None]] = []

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        yield self._conn

    def after_commit(self, callback: Callable[[], None]) -> None:
        self._commit_callbacks.append(callback)

    def run_commit_callbacks(self) -> None:
        callbacks, self._commit_callbacks = self._commit_callbacks, []
        for callback in callbacks:
            callback()


@asynccontextmanager
async def unit_of_work(pool: asyncpg.Pool) -> AsyncIterator[ConnectionScope]:
    """
    Run a block of store calls as one all-or-nothing transaction.

    Commits once when the block exits normally, then runs the scope's
    after-commit callbacks; any exception, including cancellation, rolls
    back every write made inside it.

    Yields:
        ConnectionScope bound to the transaction's connection
    """
    async with pool.acquire() as conn:
        scope = ConnectionScope(conn)
        async with conn.transaction():
            yield scope
        scope.run_commit_callbacks()


class PostgresProbe:
    """Connectivity check used by the readiness endpoint."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def check(self) -> None:
        """
        Ping the database.

        Raises:
            Exception: Whatever the driver raised while connecting or querying
        """
        async with self.pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
