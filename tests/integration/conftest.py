"""
PostgreSQL fixtures for integration tests.

These tests start a real PostgreSQL with testcontainers and need Docker.
They are skipped unless the INTEGRATION environment variable is set.
"""

import os

import pytest
import pytest_asyncio
from testcontainers.postgres import PostgresContainer

from api.src.config import Settings
from api.src.database import close_db_pool, init_db_pool
from api.src.migrations import apply_migrations


def pytest_collection_modifyitems(config, items):
    if os.environ.get("INTEGRATION"):
        return
    skip = pytest.mark.skip(reason="set INTEGRATION=1 to run tests against PostgreSQL")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def postgres_container():
    """Create PostgreSQL testcontainer."""
    with PostgresContainer("postgres:15-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_settings(postgres_container) -> Settings:
    return Settings(
        _env_file=None,
        postgres_host=postgres_container.get_container_host_ip(),
        postgres_port=int(postgres_container.get_exposed_port(5432)),
        postgres_user=postgres_container.username,
        postgres_password=postgres_container.password,
        postgres_database=postgres_container.dbname,
        postgres_max_connections=5,
    )


@pytest_asyncio.fixture
async def db_pool(postgres_settings):
    """Migrated pool over an emptied schema."""
    pool = await init_db_pool(postgres_settings)
    await apply_migrations(pool)

    async with pool.acquire() as conn:
        await conn.execute("TRUNCATE members, classes, bookings")

    yield pool

    await close_db_pool(pool)
