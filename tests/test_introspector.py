"""Tests for schema introspection.

SQLite runs against a local file. Postgres and MySQL run against a fake
session that answers catalog queries from canned rows.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest

from core.dialects import Dialect
from core.errors import StatementError, ValidationError
from core.interfaces import IDialectAdapter, IDialectSession, StatementResult
from services.introspector import COLUMNS_SQL, TABLES_SQL, fetch_rows, list_tables


async def _seed(adapter) -> None:
    async with adapter.session() as session:
        await session.execute(
            "CREATE TABLE users (id INTEGER NOT NULL PRIMARY KEY, name TEXT, email TEXT NOT NULL)"
        )
        await session.execute("CREATE TABLE audit (entry TEXT)")
        for i in range(1, 6):
            await session.execute(
                "INSERT INTO users (id, name, email) VALUES (?, ?, ?)",
                [i, f"user{i}", f"user{i}@example.com"],
            )


@pytest.mark.asyncio
async def test_empty_database_has_no_tables(sqlite_adapter):
    assert await list_tables(sqlite_adapter) == []


@pytest.mark.asyncio
async def test_tables_sorted_with_columns_and_counts(sqlite_adapter):
    await _seed(sqlite_adapter)

    tables = await list_tables(sqlite_adapter)

    assert [t.name for t in tables] == ["audit", "users"]
    audit, users = tables
    assert audit.row_count == 0
    assert audit.rows == []

    assert [(c.name, c.type, c.nullable) for c in users.columns] == [
        ("id", "INTEGER", False),
        ("name", "TEXT", True),
        ("email", "TEXT", False),
    ]
    assert users.row_count == 5
    assert users.rows[0] == {"id": 1, "name": "user1", "email": "user1@example.com"}


@pytest.mark.asyncio
async def test_sample_rows_are_capped(sqlite_adapter):
    await _seed(sqlite_adapter)

    tables = await list_tables(sqlite_adapter, sample_limit=2)
    users = next(t for t in tables if t.name == "users")

    assert users.row_count == 5
    assert len(users.rows) == 2


@pytest.mark.asyncio
async def test_fetch_rows(sqlite_adapter):
    await _seed(sqlite_adapter)

    rows = await fetch_rows(sqlite_adapter, "users", limit=3)

    assert [r["id"] for r in rows] == [1, 2, 3]


@pytest.mark.asyncio
async def test_fetch_rows_rejects_injected_table_name(sqlite_adapter):
    with pytest.raises(ValidationError):
        await fetch_rows(sqlite_adapter, "users; DROP TABLE users")


@pytest.mark.asyncio
async def test_fetch_rows_missing_table(sqlite_adapter):
    with pytest.raises(StatementError):
        await fetch_rows(sqlite_adapter, "nope")


# ---------------------------------------------------------------------------
# Postgres and MySQL catalogs
# ---------------------------------------------------------------------------


class CatalogSession(IDialectSession):
    def __init__(self, adapter: "CatalogAdapter"):
        self._adapter = adapter

    async def execute(self, statement, params=None) -> StatementResult:
        self._adapter.statements.append((statement, params))
        if statement == TABLES_SQL[self._adapter.dialect]:
            return StatementResult(rows=self._adapter.table_rows)
        if statement == COLUMNS_SQL[self._adapter.dialect]:
            return StatementResult(rows=self._adapter.column_rows)
        if "COUNT(*)" in statement:
            return StatementResult(rows=[{"count": len(self._adapter.data_rows)}])
        return StatementResult(rows=self._adapter.data_rows)


class CatalogAdapter(IDialectAdapter):
    """Adapter that serves canned information_schema rows."""

    def __init__(self, dialect: Dialect, table_rows, column_rows=(), data_rows=()):
        super().__init__("fake://")
        self.dialect = dialect
        self.table_rows = list(table_rows)
        self.column_rows = list(column_rows)
        self.data_rows = list(data_rows)
        self.statements: list[tuple[str, object]] = []

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[CatalogSession, None]:
        yield CatalogSession(self)


USER_COLUMNS = [
    {"column_name": "id", "data_type": "integer", "is_nullable": "NO"},
    {"column_name": "name", "data_type": "text", "is_nullable": "YES"},
]
USER_ROWS = [{"id": 1, "name": "a"}, {"id": 2, "name": None}]


@pytest.mark.asyncio
@pytest.mark.parametrize("dialect", [Dialect.POSTGRES, Dialect.MYSQL])
async def test_catalog_empty_database(dialect):
    adapter = CatalogAdapter(dialect, table_rows=[])

    assert await list_tables(adapter) == []
    assert adapter.statements == [(TABLES_SQL[dialect], None)]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "dialect, marker, quoted",
    [
        (Dialect.POSTGRES, "$1", '"users"'),
        (Dialect.MYSQL, "%s", "`users`"),
    ],
)
async def test_catalog_describes_table(dialect, marker, quoted):
    adapter = CatalogAdapter(
        dialect,
        table_rows=[{"table_name": "users"}],
        column_rows=USER_COLUMNS,
        data_rows=USER_ROWS,
    )

    tables = await list_tables(adapter, sample_limit=10)

    assert len(tables) == 1
    users = tables[0]
    assert users.name == "users"
    assert [(c.name, c.type, c.nullable) for c in users.columns] == [
        ("id", "integer", False),
        ("name", "text", True),
    ]
    assert users.row_count == 2
    assert users.rows == USER_ROWS

    columns_sql, columns_params = adapter.statements[1]
    assert f"table_name = {marker}" in columns_sql
    assert columns_params == ["users"]
    assert adapter.statements[2:] == [
        (f"SELECT COUNT(*) AS count FROM {quoted}", None),
        (f"SELECT * FROM {quoted} LIMIT 10", None),
    ]


@pytest.mark.asyncio
async def test_catalog_tables_sorted_by_name():
    adapter = CatalogAdapter(
        Dialect.MYSQL,
        table_rows=[{"table_name": "orders"}, {"table_name": "accounts"}],
    )

    tables = await list_tables(adapter)

    assert [t.name for t in tables] == ["accounts", "orders"]
    assert [p for _, p in adapter.statements if p is not None] == [["accounts"], ["orders"]]
