"""
PostgreSQL repository adapters - Implement the domain store protocols.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 (async) with raw SQL.

Concurrency Design:
-------------------
1. **Accounts**: the UNIQUE constraint on handle is the only arbiter of
   duplicate sign-ups; a UniqueViolation surfaces as DuplicateHandle.

2. **Pending entries**: ``INSERT ... ON CONFLICT DO UPDATE`` gives
   last-writer-wins per key. ``discard`` deletes only when the stored code
   still matches, so a rollback never removes a newer entry.

3. **Orders**: every status change is one ``UPDATE ... WHERE status = %s
   RETURNING`` statement. Two concurrent accepts cannot both succeed.
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

from psycopg import errors, sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from src.domain.entities import (
    Account,
    Order,
    OrderStatus,
    PendingOrder,
    PendingRegistration,
    Product,
)
from src.domain.exceptions import DuplicateHandle

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = """
    id, customer_name, customer_email, product_id, product_name, quantity,
    status, placed_at, dispatched_at, dispatched_by, received_at
"""

_PRODUCT_COLUMNS = "id, name, price, available, created_at, updated_at"


def _order_from_row(row: dict[str, Any]) -> Order:
    return Order(**{**row, "status": OrderStatus(row["status"])})


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def exists_by_handle(self, handle: str) -> bool:
        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute("SELECT 1 FROM accounts WHERE handle = %s", (handle,))
            return await cursor.fetchone() is not None

    async def create(self, handle: str, contact: str, secret_hash: str) -> Account:
        insert_sql = """
            INSERT INTO accounts (handle, contact, secret_hash, created_at)
            VALUES (%s, %s, %s, NOW())
            RETURNING handle, contact, created_at
        """
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cursor:
                    await cursor.execute(insert_sql, (handle, contact, secret_hash))
                    row = await cursor.fetchone()
                await conn.commit()
        except errors.UniqueViolation:
            raise DuplicateHandle(handle) from None
        return Account(**row)

    async def find_by_handle(self, handle: str, include_secret: bool = False) -> Account | None:
        columns = "handle, contact, created_at"
        if include_secret:
            columns += ", secret_hash"
        query = f"SELECT {columns} FROM accounts WHERE handle = %s"

        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(query, (handle,))
                row = await cursor.fetchone()
        return Account(**row) if row is not None else None


class PostgresPendingRegistrationRepository:
    """Implements PendingRegistrationRepository protocol via psycopg3."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def put(self, pending: PendingRegistration) -> None:
        upsert_sql = """
            INSERT INTO pending_registrations
                (handle, contact, secret_hash, code, created_at, expires_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (handle) DO UPDATE
            SET contact = EXCLUDED.contact,
                secret_hash = EXCLUDED.secret_hash,
                code = EXCLUDED.code,
                created_at = EXCLUDED.created_at,
                expires_at = EXCLUDED.expires_at
        """
        async with self._pool.connection() as conn:
            await conn.execute(
                upsert_sql,
                (
                    pending.handle,
                    pending.contact,
                    pending.secret_hash,
                    pending.code,
                    pending.created_at,
                    pending.expires_at,
                ),
            )
            await conn.commit()

    async def get(self, handle: str) -> PendingRegistration | None:
        select_sql = """
            SELECT handle, contact, secret_hash, code, created_at, expires_at
            FROM pending_registrations
            WHERE handle = %s
        """
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(select_sql, (handle,))
                row = await cursor.fetchone()
        return PendingRegistration(**row) if row is not None else None

    async def delete(self, handle: str) -> None:
        async with self._pool.connection() as conn:
            await conn.execute("DELETE FROM pending_registrations WHERE handle = %s", (handle,))
            await conn.commit()

    async def discard(self, handle: str, code: str) -> bool:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM pending_registrations WHERE handle = %s AND code = %s",
                (handle, code),
            )
            await conn.commit()
            return cursor.rowcount == 1


class PostgresPendingOrderRepository:
    """Implements PendingOrderRepository protocol via psycopg3."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def put(self, pending: PendingOrder) -> None:
        upsert_sql = """
            INSERT INTO pending_orders
                (customer_email, customer_name, product_id, product_name, quantity,
                 code, created_at, expires_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (customer_email) DO UPDATE
            SET customer_name = EXCLUDED.customer_name,
                product_id = EXCLUDED.product_id,
                product_name = EXCLUDED.product_name,
                quantity = EXCLUDED.quantity,
                code = EXCLUDED.code,
                created_at = EXCLUDED.created_at,
                expires_at = EXCLUDED.expires_at
        """
        async with self._pool.connection() as conn:
            await conn.execute(
                upsert_sql,
                (
                    pending.customer_email,
                    pending.customer_name,
                    pending.product_id,
                    pending.product_name,
                    pending.quantity,
                    pending.code,
                    pending.created_at,
                    pending.expires_at,
                ),
            )
            await conn.commit()

    async def get(self, customer_email: str) -> PendingOrder | None:
        select_sql = """
            SELECT customer_email, customer_name, product_id, product_name, quantity,
                   code, created_at, expires_at
            FROM pending_orders
            WHERE customer_email = %s
        """
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(select_sql, (customer_email,))
                row = await cursor.fetchone()
        return PendingOrder(**row) if row is not None else None

    async def delete(self, customer_email: str) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(
                "DELETE FROM pending_orders WHERE customer_email = %s", (customer_email,)
            )
            await conn.commit()

    async def discard(self, customer_email: str, code: str) -> bool:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM pending_orders WHERE customer_email = %s AND code = %s",
                (customer_email, code),
            )
            await conn.commit()
            return cursor.rowcount == 1


class PostgresOrderRepository:
    """
    Implements OrderRepository protocol via psycopg3.

    Status changes are conditional on the current status so transitions
    stay forward-only under concurrency.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def _fetch_one(self, query: str, params: tuple) -> Order | None:
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(query, params)
                row = await cursor.fetchone()
            await conn.commit()
        return _order_from_row(row) if row is not None else None

    async def create(
        self,
        customer_name: str,
        customer_email: str,
        product_id: UUID,
        product_name: str,
        quantity: int,
    ) -> Order:
        insert_sql = f"""
            INSERT INTO orders
                (customer_name, customer_email, product_id, product_name, quantity,
                 status, placed_at)
            VALUES (%s, %s, %s, %s, %s, %s, NOW())
            RETURNING {_ORDER_COLUMNS}
        """
        order = await self._fetch_one(
            insert_sql,
            (
                customer_name,
                customer_email,
                product_id,
                product_name,
                quantity,
                OrderStatus.PLACED.value,
            ),
        )
        if order is None:
            raise RuntimeError("INSERT INTO orders returned no row")
        return order

    async def get(self, order_id: UUID) -> Order | None:
        return await self._fetch_one(
            f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = %s", (order_id,)
        )

    async def transition(
        self,
        order_id: UUID,
        from_status: OrderStatus,
        to_status: OrderStatus,
        dispatched_at: datetime | None = None,
        dispatched_by: str | None = None,
    ) -> Order | None:
        update_sql = f"""
            UPDATE orders
            SET status = %s,
                dispatched_at = COALESCE(%s, dispatched_at),
                dispatched_by = COALESCE(%s, dispatched_by)
            WHERE id = %s AND status = %s
            RETURNING {_ORDER_COLUMNS}
        """
        return await self._fetch_one(
            update_sql,
            (to_status.value, dispatched_at, dispatched_by, order_id, from_status.value),
        )

    async def mark_received(self, order_id: UUID, received_at: datetime) -> Order | None:
        update_sql = f"""
            UPDATE orders
            SET received_at = %s
            WHERE id = %s AND status = %s AND received_at IS NULL
            RETURNING {_ORDER_COLUMNS}
        """
        return await self._fetch_one(
            update_sql, (received_at, order_id, OrderStatus.ACCEPTED.value)
        )

    async def delete_placed(self, order_id: UUID) -> bool:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(
                "DELETE FROM orders WHERE id = %s AND status = %s",
                (order_id, OrderStatus.PLACED.value),
            )
            await conn.commit()
            return cursor.rowcount == 1


class PostgresProductRepository:
    """Implements ProductRepository protocol via psycopg3."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def _fetch_one(self, query: sql.Composable | str, params: tuple) -> Product | None:
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(query, params)
                row = await cursor.fetchone()
            await conn.commit()
        return Product(**row) if row is not None else None

    async def create(self, name: str, price: Decimal, available: bool) -> Product:
        insert_sql = f"""
            INSERT INTO products (name, price, available, created_at, updated_at)
            VALUES (%s, %s, %s, NOW(), NOW())
            RETURNING {_PRODUCT_COLUMNS}
        """
        product = await self._fetch_one(insert_sql, (name, price, available))
        if product is None:
            raise RuntimeError("INSERT INTO products returned no row")
        return product

    async def get(self, product_id: UUID) -> Product | None:
        return await self._fetch_one(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = %s", (product_id,)
        )

    async def update(self, product_id: UUID, changes: dict[str, Any]) -> Product | None:
        # Column names come from the domain's allow-list; values stay parameterized.
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in changes
        )
        update_sql = sql.SQL(
            "UPDATE products SET {}, updated_at = NOW() WHERE id = %s RETURNING {}"
        ).format(assignments, sql.SQL(_PRODUCT_COLUMNS))
        return await self._fetch_one(update_sql, (*changes.values(), product_id))

    async def delete(self, product_id: UUID) -> bool:
        async with self._pool.connection() as conn:
            cursor = await conn.execute("DELETE FROM products WHERE id = %s", (product_id,))
            await conn.commit()
            return cursor.rowcount == 1


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)
                await conn.commit()

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
