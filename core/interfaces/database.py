"""Dialect adapter interface definitions.

This module defines the contracts for talking to a user-supplied database,
allowing the Postgres, MySQL and SQLite-network drivers to be swapped
transparently behind the dispatcher and introspector.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Any, Sequence

from core.dialects import Dialect
from core.errors import DatabaseConnectionError, StatementError

Row = dict[str, Any]

BINARY_TYPES = (bytes, bytearray, memoryview)


def make_row(items: Iterable[tuple[str, Any]]) -> Row:
    """Build a JSON-safe row from (column, value) pairs.

    Binary values (BLOB, bytea, VARBINARY) are returned as lowercase hex
    strings.
    """
    return {
        column: bytes(value).hex() if isinstance(value, BINARY_TYPES) else value
        for column, value in items
    }


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Raw connection URL plus the dialect it speaks."""

    url: str
    dialect: Dialect


@dataclass
class ColumnInfo:
    """Column metadata as reported by the engine catalog."""

    name: str
    type: str
    nullable: bool


@dataclass
class ColumnSpec:
    """Column definition used when creating a table."""

    name: str
    type: str
    nullable: bool = False
    primary_key: bool = False


@dataclass
class TableInfo:
    """A table with its columns, row count and sample rows."""

    name: str
    columns: list[ColumnInfo] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    row_count: int = 0


@dataclass
class StatementResult:
    """Outcome of a single statement.

    ``rows`` is set when the statement produced a row set, otherwise
    ``affected_count`` holds the driver's row count.
    """

    rows: list[Row] | None = None
    affected_count: int | None = None
    last_insert_id: int | None = None

    @property
    def returns_rows(self) -> bool:
        return self.rows is not None


class IDialectSession(ABC):
    """One open transport connection, valid inside ``IDialectAdapter.session()``."""

    @abstractmethod
    async def execute(
        self,
        statement: str,
        params: Sequence[Any] | None = None,
    ) -> StatementResult:
        """Execute a statement with positional driver-native parameters."""
        ...

    async def fetch_all(
        self,
        statement: str,
        params: Sequence[Any] | None = None,
    ) -> list[Row]:
        """Execute a statement and return its rows (empty if none)."""
        result = await self.execute(statement, params)
        return result.rows or []


class IDialectAdapter(ABC):
    """Interface for executing SQL against one user-supplied database.

    Adapters are cheap, request-scoped objects. Every ``session()`` opens a
    fresh transport connection and closes it on exit, on both success and
    failure paths. Nothing is pooled across calls.

    Usage:
        adapter = get_adapter(descriptor)
        async with adapter.session() as session:
            rows = await session.fetch_all("SELECT 1")
    """

    dialect: Dialect

    def __init__(self, url: str):
        self.url = url

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[IDialectSession]:
        """Open a scoped connection."""
        ...

    def placeholder(self, index: int) -> str:
        """Driver placeholder for the 1-based parameter ``index``."""
        return self.dialect.placeholder(index)

    async def execute(
        self,
        statement: str,
        params: Sequence[Any] | None = None,
    ) -> StatementResult:
        """Execute one statement on its own connection."""
        async with self.session() as session:
            return await session.execute(statement, params)

    async def probe(self) -> None:
        """Run ``SELECT 1`` to verify connectivity.

        Some clients connect lazily, so a failing probe is reported as a
        connection failure whichever stage raised.
        """
        try:
            await self.execute("SELECT 1")
        except StatementError as e:
            raise DatabaseConnectionError(str(e)) from e

