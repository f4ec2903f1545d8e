"""
Class repository for database operations.

Provides async CRUD operations for classes using asyncpg with PostgreSQL.
"""

import structlog
from typing import List
from uuid import UUID

from api.src.errors import RecordNotFoundError
from api.src.models.classes import Class, NewClass, UpdateClass
from api.src.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)

CLASS_COLUMNS = "id, name, start_date, end_date, capacity, created_at, updated_at"
UPDATABLE_COLUMNS = ("name", "start_date", "end_date", "capacity")


def _to_class(row) -> Class:
    return Class(
        id=row["id"],
        name=row["name"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        capacity=row["capacity"],
        created_at=row["created_at"],
        updated_at=row["updated_at"]
    )


class ClassRepository(BaseRepository):
    """Repository for class database operations."""

    table = "classes"

    async def add(self, class_id: UUID, new_class: NewClass) -> Class:
        """
        Insert a new class.

        Args:
            class_id: Identity assigned by the service
            new_class: Class data

        Returns:
            Stored class including server timestamps
        """
        try:
            async with self.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO classes (id, name, start_date, end_date, capacity)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {CLASS_COLUMNS}
                    """,
                    class_id,
                    new_class.name,
                    new_class.start_date,
                    new_class.end_date,
                    new_class.capacity
                )

            logger.info("class_created", class_id=str(class_id), capacity=new_class.capacity)
            return _to_class(row)

        except Exception as e:
            logger.error("class_create_failed", error=str(e), class_id=str(class_id))
            raise

    async def get_by_id(self, class_id: UUID) -> Class:
        """
        Get class by ID.

        Raises:
            RecordNotFoundError: If no class has this ID
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {CLASS_COLUMNS}
                    FROM classes
                    WHERE id = $1
                    """,
                    class_id
                )
        except Exception as e:
            logger.error("class_get_by_id_failed", error=str(e), class_id=str(class_id))
            raise

        if not row:
            logger.debug("class_not_found", class_id=str(class_id))
            raise RecordNotFoundError(self.table, class_id)

        return _to_class(row)

    async def update(self, class_id: UUID, update_class: UpdateClass) -> Class:
        """
        Apply a partial update to any subset of name, dates and capacity.

        With nothing to change the current row is returned untouched.

        Raises:
            RecordNotFoundError: If no class has this ID
        """
        set_clause, params = self.build_set_clause(update_class.changes(), UPDATABLE_COLUMNS)
        if not set_clause:
            return await self.get_by_id(class_id)

        params.append(class_id)
        try:
            async with self.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE classes
                    SET {set_clause}
                    WHERE id = ${len(params)}
                    RETURNING {CLASS_COLUMNS}
                    """,
                    *params
                )
        except Exception as e:
            logger.error("class_update_failed", error=str(e), class_id=str(class_id))
            raise

        if not row:
            logger.debug("class_not_found", class_id=str(class_id))
            raise RecordNotFoundError(self.table, class_id)

        logger.info("class_updated", class_id=str(class_id))
        return _to_class(row)

    async def delete(self, class_id: UUID) -> None:
        """Delete a class. Deleting a missing ID is not an error."""
        try:
            async with self.transaction() as conn:
                result = await conn.execute(
                    "DELETE FROM classes WHERE id = $1",
                    class_id
                )
        except Exception as e:
            logger.error("class_delete_failed", error=str(e), class_id=str(class_id))
            raise

        logger.info(
            "class_deleted",
            class_id=str(class_id),
            deleted=self.affected_rows(result)
        )

    async def list(self, limit: int, offset: int) -> List[Class]:
        """List classes in creation order."""
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {CLASS_COLUMNS}
                    FROM classes
                    ORDER BY created_at, id
                    LIMIT $1 OFFSET $2
                    """,
                    limit,
                    offset
                )

            return [_to_class(row) for row in rows]

        except Exception as e:
            logger.error("class_list_failed", error=str(e), limit=limit, offset=offset)
            raise
