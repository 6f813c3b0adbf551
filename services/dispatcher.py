"""Action dispatcher.

Translates the uniform action vocabulary (row CRUD, schema management, raw
SQL) into dialect-specific statements and runs them through a dialect
adapter. SQL is always built, and therefore validated, before any
connection is opened.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from adapters.database import get_adapter
from core.dialects import (
    Dialect,
    adapt_placeholders,
    ensure_column_type,
    ensure_identifier,
    is_read_statement,
    with_where_prefix,
)
from core.errors import UnsupportedError, ValidationError
from core.interfaces import ColumnSpec, ConnectionDescriptor, IDialectAdapter, Row

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Actions understood by the dispatcher."""

    # Row CRUD
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    # Schema management
    CREATE_TABLE = "CREATE_TABLE"
    DROP_TABLE = "DROP_TABLE"
    ALTER_TABLE = "ALTER_TABLE"

    # Raw SQL shell
    QUERY = "QUERY"

    @classmethod
    def parse(cls, value: "str | Action") -> "Action":
        try:
            return cls(value.upper() if isinstance(value, str) else value)
        except ValueError:
            raise UnsupportedError(f"Unsupported action: {value}") from None

    @property
    def is_crud(self) -> bool:
        return self in CRUD_ACTIONS

    @property
    def is_schema(self) -> bool:
        return self in SCHEMA_ACTIONS


CRUD_ACTIONS = frozenset({Action.CREATE, Action.UPDATE, Action.DELETE})
SCHEMA_ACTIONS = frozenset({Action.CREATE_TABLE, Action.DROP_TABLE, Action.ALTER_TABLE})


@dataclass
class ActionPayload:
    """Everything an action may need besides the target table."""

    data: Mapping[str, Any] | None = None
    where_clause: str | None = None
    where_params: list[Any] = field(default_factory=list)
    columns: list[Any] | None = None
    new_table_name: str | None = None
    query: str | None = None


# ---------------------------------------------------------------------------
# Statement builders
# ---------------------------------------------------------------------------


def _require_data(data: Mapping[str, Any] | None, action: Action) -> Mapping[str, Any]:
    if not isinstance(data, Mapping) or not data:
        raise ValidationError(f"Row data is required for {action.value} operations")
    return data


def _require_where(where_clause: str | None, action: Action) -> str:
    if not where_clause or not where_clause.strip():
        raise ValidationError(f"WHERE clause is required for {action.value} operations")
    return where_clause


def build_insert(
    dialect: Dialect, table_name: str, data: Mapping[str, Any] | None
) -> tuple[str, list[Any]]:
    """Build ``INSERT INTO t (cols) VALUES (...)`` with columns in payload order."""
    table = ensure_identifier(table_name, "table name")
    data = _require_data(data, Action.CREATE)
    columns = [ensure_identifier(column, "column name") for column in data]
    placeholders = ", ".join(dialect.placeholder(i) for i in range(1, len(columns) + 1))
    statement = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    if dialect is Dialect.POSTGRES:
        statement += " RETURNING *"
    return statement, list(data.values())


def build_update(
    dialect: Dialect,
    table_name: str,
    data: Mapping[str, Any] | None,
    where_clause: str | None,
    where_params: list[Any] | None = None,
) -> tuple[str, list[Any]]:
    """Build ``UPDATE t SET ... WHERE ...``; params are SET values then WHERE values."""
    table = ensure_identifier(table_name, "table name")
    where_clause = _require_where(where_clause, Action.UPDATE)
    data = _require_data(data, Action.UPDATE)
    set_clause = ", ".join(
        f"{ensure_identifier(column, 'column name')} = {dialect.placeholder(i)}"
        for i, column in enumerate(data, start=1)
    )
    where = adapt_placeholders(with_where_prefix(where_clause), dialect, start=len(data) + 1)
    statement = f"UPDATE {table} SET {set_clause} {where}"
    if dialect is Dialect.POSTGRES:
        statement += " RETURNING *"
    return statement, [*data.values(), *(where_params or [])]


def build_delete(
    dialect: Dialect,
    table_name: str,
    where_clause: str | None,
    where_params: list[Any] | None = None,
) -> tuple[str, list[Any]]:
    """Build ``DELETE FROM t WHERE ...``."""
    table = ensure_identifier(table_name, "table name")
    where_clause = _require_where(where_clause, Action.DELETE)
    where = adapt_placeholders(with_where_prefix(where_clause), dialect)
    return f"DELETE FROM {table} {where}", list(where_params or [])


def _column_spec(entry: Any) -> ColumnSpec:
    if isinstance(entry, ColumnSpec):
        return entry
    if not isinstance(entry, Mapping):
        raise ValidationError("Each column must be an object with name and type")
    return ColumnSpec(
        name=entry.get("name"),
        type=entry.get("type"),
        nullable=bool(entry.get("nullable", False)),
        primary_key=bool(entry.get("primaryKey", entry.get("primary_key", False))),
    )


def build_create_table(dialect: Dialect, table_name: str, columns: Any) -> str:
    """Build ``CREATE TABLE t (name type [NOT NULL] [PRIMARY KEY], ...)``."""
    if not table_name or not isinstance(columns, list) or not columns:
        raise ValidationError("Table name and columns are required for CREATE_TABLE")
    table = ensure_identifier(table_name, "table name")

    definitions = []
    for spec in map(_column_spec, columns):
        name = ensure_identifier(spec.name, "column name")
        if dialect is Dialect.MYSQL:
            name = f"`{name}`"
        definition = f"{name} {ensure_column_type(spec.type)}"
        if not spec.nullable:
            definition += " NOT NULL"
        if spec.primary_key:
            definition += " PRIMARY KEY"
        definitions.append(definition)

    return f"CREATE TABLE {table} ({', '.join(definitions)})"


def build_drop_table(table_name: str) -> str:
    if not table_name:
        raise ValidationError("Table name is required for DROP_TABLE")
    return f"DROP TABLE IF EXISTS {ensure_identifier(table_name, 'table name')}"


def build_rename_table(table_name: str, new_table_name: str | None) -> str:
    if not table_name or not new_table_name:
        raise ValidationError("Table name and new table name are required for ALTER_TABLE")
    old = ensure_identifier(table_name, "table name")
    new = ensure_identifier(new_table_name, "new table name")
    return f"ALTER TABLE {old} RENAME TO {new}"


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def perform_crud(
    adapter: IDialectAdapter,
    action: Action,
    table_name: str,
    data: Mapping[str, Any] | None = None,
    where_clause: str | None = None,
    where_params: list[Any] | None = None,
) -> Any:
    """Insert, update or delete rows.

    Returns:
        CREATE: the inserted row (Postgres), the payload merged with the
        generated id (MySQL), or the payload (SQLite-network).
        UPDATE: the updated row (Postgres) or ``{"updated": True}``.
        DELETE: ``{"deleted": True}``.
    """
    dialect = adapter.dialect

    if action is Action.CREATE:
        statement, params = build_insert(dialect, table_name, data)
        result = await adapter.execute(statement, params)
        if dialect is Dialect.POSTGRES:
            return result.rows[0] if result.rows else None
        if dialect is Dialect.MYSQL and result.last_insert_id:
            return {"id": result.last_insert_id, **data}
        return dict(data)

    if action is Action.UPDATE:
        statement, params = build_update(dialect, table_name, data, where_clause, where_params)
        result = await adapter.execute(statement, params)
        if dialect is Dialect.POSTGRES:
            return result.rows[0] if result.rows else None
        return {"updated": True}

    if action is Action.DELETE:
        statement, params = build_delete(dialect, table_name, where_clause, where_params)
        await adapter.execute(statement, params)
        return {"deleted": True}

    raise UnsupportedError(f"Unsupported action: {action.value}")


async def manage_schema(
    adapter: IDialectAdapter,
    action: Action,
    table_name: str,
    columns: Any = None,
    new_table_name: str | None = None,
) -> dict[str, Any]:
    """Create, drop or rename a table."""
    if action is Action.CREATE_TABLE:
        await adapter.execute(build_create_table(adapter.dialect, table_name, columns))
        return {"created": True, "tableName": table_name}

    if action is Action.DROP_TABLE:
        await adapter.execute(build_drop_table(table_name))
        return {"deleted": True, "tableName": table_name}

    if action is Action.ALTER_TABLE:
        await adapter.execute(build_rename_table(table_name, new_table_name))
        return {"renamed": True, "oldName": table_name, "newName": new_table_name}

    raise UnsupportedError(f"Unsupported action: {action.value}")


async def run_query(adapter: IDialectAdapter, query: str | None) -> list[Row] | dict[str, Any]:
    """Run raw SQL from the shell.

    Read statements return their rows; anything else returns
    ``{"affectedRows": n}``.
    """
    if not query or not query.strip():
        raise ValidationError("Missing required parameters: query")

    result = await adapter.execute(query)
    if is_read_statement(query):
        return result.rows or []
    # DDL reports -1 on some drivers
    affected = result.affected_count
    return {"affectedRows": affected if affected is not None and affected >= 0 else 0}


class ActionDispatcher:
    """Single entry point mapping (action, connection, table, payload) to a result.

    Usage:
        dispatcher = ActionDispatcher()
        row = await dispatcher.perform(
            "CREATE", descriptor, "users", ActionPayload(data={"id": 1}),
        )
    """

    def __init__(
        self,
        adapter_factory: Callable[[ConnectionDescriptor], IDialectAdapter] = get_adapter,
    ):
        self._adapter_factory = adapter_factory

    async def perform(
        self,
        action: "str | Action",
        descriptor: ConnectionDescriptor,
        table_name: str | None = None,
        payload: ActionPayload | None = None,
    ) -> Any:
        action = Action.parse(action)
        payload = payload or ActionPayload()
        adapter = self._adapter_factory(descriptor)

        if action is Action.QUERY:
            logger.info(f"Running raw query on {descriptor.dialect.value}")
            return await run_query(adapter, payload.query)

        if not table_name:
            raise ValidationError("Missing required field: tableName")

        logger.info(f"{action.value} on {table_name} ({descriptor.dialect.value})")
        if action.is_crud:
            return await perform_crud(
                adapter,
                action,
                table_name,
                data=payload.data,
                where_clause=payload.where_clause,
                where_params=payload.where_params,
            )
        return await manage_schema(
            adapter,
            action,
            table_name,
            columns=payload.columns,
            new_table_name=payload.new_table_name,
        )
