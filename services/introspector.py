"""Schema introspection across dialects.

Reads each engine's own catalog: ``information_schema`` for Postgres and
MySQL, ``sqlite_master`` plus ``PRAGMA table_info`` for SQLite-network.
"""

import logging

from core.config import settings
from core.dialects import Dialect, ensure_identifier, quote_identifier
from core.interfaces import ColumnInfo, IDialectAdapter, IDialectSession, Row, TableInfo

logger = logging.getLogger(__name__)

TABLES_SQL = {
    Dialect.POSTGRES: """
        SELECT table_name AS table_name
        FROM information_schema.tables
        WHERE table_schema = 'public'
        AND table_type = 'BASE TABLE'
        ORDER BY table_name
    """,
    Dialect.MYSQL: """
        SELECT table_name AS table_name
        FROM information_schema.tables
        WHERE table_schema = DATABASE()
        AND table_type = 'BASE TABLE'
        ORDER BY table_name
    """,
    Dialect.SQLITE_NETWORK: """
        SELECT name AS table_name FROM sqlite_master
        WHERE type = 'table'
        AND name NOT LIKE 'sqlite_%'
        ORDER BY name
    """,
}

COLUMNS_SQL = {
    Dialect.POSTGRES: """
        SELECT column_name AS column_name, data_type AS data_type, is_nullable AS is_nullable
        FROM information_schema.columns
        WHERE table_name = $1
        AND table_schema = 'public'
        ORDER BY ordinal_position
    """,
    Dialect.MYSQL: """
        SELECT column_name AS column_name, data_type AS data_type, is_nullable AS is_nullable
        FROM information_schema.columns
        WHERE table_name = %s
        AND table_schema = DATABASE()
        ORDER BY ordinal_position
    """,
}


async def _fetch_columns(
    session: IDialectSession, dialect: Dialect, table_name: str
) -> list[ColumnInfo]:
    if dialect is Dialect.SQLITE_NETWORK:
        rows = await session.fetch_all(
            f"PRAGMA table_info({quote_identifier(dialect, table_name)})"
        )
        return [
            ColumnInfo(name=row["name"], type=row["type"], nullable=row["notnull"] == 0)
            for row in rows
        ]

    rows = await session.fetch_all(COLUMNS_SQL[dialect], [table_name])
    return [
        ColumnInfo(
            name=row["column_name"],
            type=row["data_type"],
            nullable=row["is_nullable"] == "YES",
        )
        for row in rows
    ]


async def _describe_table(
    session: IDialectSession, dialect: Dialect, table_name: str, sample_limit: int
) -> TableInfo:
    quoted = quote_identifier(dialect, table_name)
    columns = await _fetch_columns(session, dialect, table_name)
    count_rows = await session.fetch_all(f"SELECT COUNT(*) AS count FROM {quoted}")
    rows = await session.fetch_all(f"SELECT * FROM {quoted} LIMIT {int(sample_limit)}")
    return TableInfo(
        name=table_name,
        columns=columns,
        rows=rows,
        row_count=int(count_rows[0]["count"]) if count_rows else 0,
    )


async def list_tables(
    adapter: IDialectAdapter, sample_limit: int | None = None
) -> list[TableInfo]:
    """List base tables with columns, row counts and sample rows.

    Tables are described one after another on a single connection. An empty
    database yields an empty list.
    """
    sample_limit = sample_limit or settings.SAMPLE_ROW_LIMIT
    dialect = adapter.dialect
    tables: list[TableInfo] = []

    async with adapter.session() as session:
        table_rows = await session.fetch_all(TABLES_SQL[dialect])
        names = sorted(row["table_name"] for row in table_rows)
        for name in names:
            tables.append(await _describe_table(session, dialect, name, sample_limit))

    logger.info(f"Introspected {len(tables)} tables ({dialect.value})")
    return tables


async def fetch_rows(
    adapter: IDialectAdapter, table_name: str, limit: int | None = None
) -> list[Row]:
    """Return up to ``limit`` rows of a caller-named table."""
    table = ensure_identifier(table_name, "table name")
    limit = limit or settings.SAMPLE_ROW_LIMIT
    async with adapter.session() as session:
        return await session.fetch_all(f"SELECT * FROM {table} LIMIT {int(limit)}")
