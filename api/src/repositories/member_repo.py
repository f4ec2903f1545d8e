"""
Member repository for database operations.

Provides async CRUD operations for members using asyncpg with PostgreSQL.
"""

import structlog
from typing import List
from uuid import UUID

from api.src.errors import RecordNotFoundError
from api.src.models.members import Member, NewMember, UpdateMember
from api.src.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)

MEMBER_COLUMNS = "id, name, created_at, updated_at"
UPDATABLE_COLUMNS = ("name",)


def _to_member(row) -> Member:
    return Member(
        id=row["id"],
        name=row["name"],
        created_at=row["created_at"],
        updated_at=row["updated_at"]
    )


class MemberRepository(BaseRepository):
    """Repository for member database operations."""

    table = "members"

    async def add(self, member_id: UUID, new_member: NewMember) -> Member:
        """
        Insert a new member.

        Args:
            member_id: Identity assigned by the service
            new_member: Member data

        Returns:
            Stored member including server timestamps
        """
        try:
            async with self.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO members (id, name)
                    VALUES ($1, $2)
                    RETURNING {MEMBER_COLUMNS}
                    """,
                    member_id,
                    new_member.name
                )

            logger.info("member_created", member_id=str(member_id))
            return _to_member(row)

        except Exception as e:
            logger.error("member_create_failed", error=str(e), member_id=str(member_id))
            raise

    async def get_by_id(self, member_id: UUID) -> Member:
        """
        Get member by ID.

        Raises:
            RecordNotFoundError: If no member has this ID
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {MEMBER_COLUMNS}
                    FROM members
                    WHERE id = $1
                    """,
                    member_id
                )
        except Exception as e:
            logger.error("member_get_by_id_failed", error=str(e), member_id=str(member_id))
            raise

        if not row:
            logger.debug("member_not_found", member_id=str(member_id))
            raise RecordNotFoundError(self.table, member_id)

        return _to_member(row)

    async def update(self, member_id: UUID, update_member: UpdateMember) -> Member:
        """
        Apply a partial update.

        With nothing to change the current row is returned untouched.

        Raises:
            RecordNotFoundError: If no member has this ID
        """
        set_clause, params = self.build_set_clause(update_member.changes(), UPDATABLE_COLUMNS)
        if not set_clause:
            return await self.get_by_id(member_id)

        params.append(member_id)
        try:
            async with self.transaction() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE members
                    SET {set_clause}
                    WHERE id = ${len(params)}
                    RETURNING {MEMBER_COLUMNS}
                    """,
                    *params
                )
        except Exception as e:
            logger.error("member_update_failed", error=str(e), member_id=str(member_id))
            raise

        if not row:
            logger.debug("member_not_found", member_id=str(member_id))
            raise RecordNotFoundError(self.table, member_id)

        logger.info("member_updated", member_id=str(member_id))
        return _to_member(row)

    async def delete(self, member_id: UUID) -> None:
        """Delete a member. Deleting a missing ID is not an error."""
        try:
            async with self.transaction() as conn:
                result = await conn.execute(
                    "DELETE FROM members WHERE id = $1",
                    member_id
                )
        except Exception as e:
            logger.error("member_delete_failed", error=str(e), member_id=str(member_id))
            raise

        logger.info(
            "member_deleted",
            member_id=str(member_id),
            deleted=self.affected_rows(result)
        )

    async def list(self, limit: int, offset: int) -> List[Member]:
        """List members in creation order."""
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {MEMBER_COLUMNS}
                    FROM members
                    ORDER BY created_at, id
                    LIMIT $1 OFFSET $2
                    """,
                    limit,
                    offset
                )

            return [_to_member(row) for row in rows]

        except Exception as e:
            logger.error("member_list_failed", error=str(e), limit=limit, offset=offset)
            raise
