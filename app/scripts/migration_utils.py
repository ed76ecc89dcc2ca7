# app/scripts/migration_utils.py
"""Helpers shared by the idempotent migration scripts.

Every script can be run any number of times: tables are created with
``checkfirst`` and seed rows are inserted with ``ON CONFLICT DO NOTHING``,
so a second run changes nothing.
"""

from typing import Iterable

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.db import Base

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def create_tables(conn: AsyncConnection, tables: Iterable[Table]) -> None:
    tables = list(tables)
    await conn.run_sync(
        lambda sync_conn: Base.metadata.create_all(sync_conn, tables=tables, checkfirst=True)
    )


async def insert_ignore(conn: AsyncConnection, table: Table, rows: Iterable[dict]) -> int:
    """Insert rows that do not violate a unique constraint; return how many landed."""
    dialect_insert = _DIALECT_INSERTS.get(conn.dialect.name)
    if dialect_insert is None:
        raise RuntimeError(f"Unsupported database dialect: {conn.dialect.name}")

    inserted = 0
    for row in rows:
        result = await conn.execute(
            dialect_insert(table).values(**row).on_conflict_do_nothing()
        )
        inserted += max(result.rowcount or 0, 0)
    return inserted
