"""
Versioned schema for the booking tables.

Applied at startup. Versions already recorded in ``schema_migrations`` are
skipped; a transaction-scoped advisory lock keeps concurrently starting
workers from applying the same version twice. Append new migrations with an
incremented version number; never edit an applied one.
"""

import asyncpg
import structlog
from typing import List, Tuple

logger = structlog.get_logger(__name__)

# Arbitrary constant shared by every instance of the service.
MIGRATION_LOCK_ID = 72_310_554

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS members (
            id UUID PRIMARY KEY,
            name TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        CREATE TABLE IF NOT EXISTS classes (
            id UUID PRIMARY KEY,
            name TEXT NOT NULL,
            start_date TIMESTAMPTZ NOT NULL,
            end_date TIMESTAMPTZ NOT NULL,
            capacity INTEGER NOT NULL CHECK (capacity > 0),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        -- member_id and class_id are plain columns: removing a member or a
        -- class leaves its bookings in place.
        CREATE TABLE IF NOT EXISTS bookings (
            id UUID PRIMARY KEY,
            member_id UUID NOT NULL,
            class_id UUID NOT NULL,
            class_date DATE NOT NULL,
            booked_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        """,
    ),
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_members_created_at ON members(created_at, id);
        CREATE INDEX IF NOT EXISTS idx_classes_created_at ON classes(created_at, id);
        CREATE INDEX IF NOT EXISTS idx_bookings_booked_at ON bookings(booked_at, id);
        CREATE INDEX IF NOT EXISTS idx_bookings_member_id ON bookings(member_id);
        CREATE INDEX IF NOT EXISTS idx_bookings_class_id ON bookings(class_id);
        """,
    ),
]


async def apply_migrations(pool: asyncpg.Pool) -> int:
    """
    Apply pending migrations in version order.

    Args:
        pool: asyncpg connection pool

    Returns:
        Schema version after the run
    """
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute("SELECT pg_advisory_xact_lock($1)", MIGRATION_LOCK_ID)
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            current_version = await conn.fetchval(
                "SELECT COALESCE(MAX(version), 0) FROM schema_migrations"
            )

            for version, sql in MIGRATIONS:
                if version <= current_version:
                    continue

                logger.info("migration_applying", version=version)
                await conn.execute(sql)
                await conn.execute(
                    "INSERT INTO schema_migrations (version) VALUES ($1)",
                    version
                )
                current_version = version

    logger.info("migrations_complete", version=current_version)
    return current_version
