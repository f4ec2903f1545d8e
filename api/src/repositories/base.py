"""
Shared plumbing for the asyncpg repositories.

Repositories accept anything pool-shaped: an ``asyncpg.Pool`` or a
``ConnectionScope`` wrapping the request's connection. Either way
``acquire()`` yields a connection usable as an async context manager.
"""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Iterable, List, Tuple


class BaseRepository:
    """Common connection handling for table repositories."""

    table: str = ""

    def __init__(self, pool):
        """
        Initialize repository.

        Args:
            pool: asyncpg connection pool or a ConnectionScope
        """
        self.pool = pool

    @asynccontextmanager
    async def transaction(self):
        """
        Context manager for database transactions.

        Nested inside a request unit of work this becomes a savepoint.

        Yields:
            asyncpg.Connection: Database connection
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    def after_commit(self, callback: Callable[[], None]) -> None:
        """
        Run ``callback`` once the current writes are durable.

        Inside a request unit of work the callback waits for the request
        commit and is dropped on rollback. On a bare pool each write has
        already committed, so it runs immediately.
        """
        register = getattr(self.pool, "after_commit", None)
        if register is None:
            callback()
        else:
            register(callback)

    @staticmethod
    def build_set_clause(
        changes: Dict[str, Any],
        allowed_columns: Iterable[str],
    ) -> Tuple[str, List[Any]]:
        """
        Build an ``UPDATE ... SET`` clause from supplied column values.

        Only whitelisted columns are used and ``updated_at`` is always bumped.
        Placeholders start at ``$1``; the caller appends the id parameter.

        Returns:
            Tuple of (set clause, parameter list). The clause is empty when
            no whitelisted column was supplied.
        """
        updates = []
        params: List[Any] = []
        for column in allowed_columns:
            if column in changes:
                params.append(changes[column])
                updates.append(f"{column} = ${len(params)}")

        if not updates:
            return "", []

        updates.append("updated_at = NOW()")
        return ", ".join(updates), params

    @staticmethod
    def affected_rows(status: str) -> int:
        """Parse the row count out of an asyncpg command status ("DELETE 1")."""
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError):
            return 0
