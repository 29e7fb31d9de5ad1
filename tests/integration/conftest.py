"""
Shared fixtures for integration tests.

Requires PostgreSQL (DATABASE_URL). Every test in this directory is
skipped when the database is unreachable.
"""

from collections.abc import AsyncGenerator

import psycopg
import pytest
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings

TABLES = ("orders", "pending_orders", "products", "pending_registrations", "accounts")


def _database_available() -> bool:
    try:
        with psycopg.connect(get_settings().database_url, connect_timeout=2):
            return True
    except psycopg.OperationalError:
        return False


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    integration_items = [item for item in items if "integration" in item.path.parts]
    if not integration_items:
        return
    available = _database_available()
    for item in integration_items:
        item.add_marker(pytest.mark.integration)
        if not available:
            item.add_marker(pytest.mark.skip(reason="PostgreSQL is not reachable"))


@pytest.fixture
async def pool() -> AsyncGenerator[AsyncConnectionPool, None]:
    """Create a migrated connection pool with empty tables."""
    pool = AsyncConnectionPool(
        conninfo=get_settings().database_url,
        min_size=1,
        max_size=10,
        open=False,
    )
    await pool.open()
    await run_migrations(pool)
    async with pool.connection() as conn:
        await conn.execute(f"TRUNCATE {', '.join(TABLES)}")
        await conn.commit()
    yield pool
    await pool.close()
