"""Client-side database state and edit sessions.

``DatabaseStore`` holds the connection, the cached tables, the selected table
and any in-progress row edits. Edits are applied to the cache only after the
API confirms them; a rejected save keeps the edit session so no input is
lost.

Per-row lifecycle:
    clean -> editing (start_editing) -> clean (save_editing / cancel_editing)
    drafting (add_new_row) -> committed (save_editing) | discarded (cancel_editing)
"""

import json
import logging
from typing import Any

from client.api_client import ApiError, DbAdminApiClient
from client.models import Connection, EditSession, Row, Table
from client.persistence import JsonFileKeyValueStore, KeyValueStore
from core.config import settings

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "connection": "database_connection",
    "tables": "database_tables",
    "selected_table": "selected_table",
}


def identify_row(snapshot: Row | None) -> tuple[str, Any]:
    """Return (column, value) identifying a row.

    The first column of the snapshot is treated as the row's key.
    """
    if not snapshot:
        raise ValueError("Row has no columns to identify it by")
    column = next(iter(snapshot))
    return column, snapshot[column]


class DatabaseStore:
    """State object shared by the UI.

    Usage:
        store = create_store()
        await store.connect("postgresql://localhost/app", "postgresql")
        await store.load_tables()
        store.select_table("users")
        store.start_editing(0)
        store.update_editing_value(0, "name", "b")
        await store.save_editing(0)
    """

    def __init__(self, api: DbAdminApiClient, persistence: KeyValueStore):
        self._api = api
        self._persistence = persistence

        # Connection state
        self.connection: Connection | None = self._load_connection()
        self.is_connecting = False
        self.connection_error: str | None = None

        # Database structure
        self.tables: list[Table] = self._load_tables()
        self.selected_table: str | None = self._persistence.get(STORAGE_KEYS["selected_table"])

        # UI state
        self.is_loading = False
        self.error: str | None = None

        # Editing state, keyed by row index
        self.editing_rows: dict[int, EditSession] = {}
        self.is_edit_mode = False

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_json(self, key: str) -> Any:
        raw = self._persistence.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding corrupt stored value for {key}")
            return None

    def _load_connection(self) -> Connection | None:
        data = self._load_json(STORAGE_KEYS["connection"])
        if not isinstance(data, dict):
            return None
        try:
            return Connection.from_dict(data)
        except (KeyError, TypeError):
            logger.warning("Discarding malformed stored connection")
            return None

    def _load_tables(self) -> list[Table]:
        data = self._load_json(STORAGE_KEYS["tables"])
        if not isinstance(data, list):
            return []
        try:
            return [Table.from_dict(t) for t in data]
        except (KeyError, TypeError, AttributeError, ValueError):
            logger.warning("Discarding malformed stored tables")
            return []

    def set_connection(self, connection: Connection | None) -> None:
        self.connection = connection
        if connection:
            self._persistence.set(STORAGE_KEYS["connection"], json.dumps(connection.to_dict()))
        else:
            self._persistence.remove(STORAGE_KEYS["connection"])

    def set_tables(self, tables: list[Table]) -> None:
        self.tables = tables
        self._persist_tables()

    def _persist_tables(self) -> None:
        self._persistence.set(
            STORAGE_KEYS["tables"],
            json.dumps([t.to_dict() for t in self.tables], default=str),
        )

    def select_table(self, table_name: str | None) -> None:
        self.selected_table = table_name
        if table_name:
            self._persistence.set(STORAGE_KEYS["selected_table"], table_name)
        else:
            self._persistence.remove(STORAGE_KEYS["selected_table"])

    def set_edit_mode(self, enabled: bool) -> None:
        self.is_edit_mode = enabled

    def current_table(self) -> Table | None:
        return next((t for t in self.tables if t.name == self.selected_table), None)

    # ------------------------------------------------------------------
    # Connection and loading
    # ------------------------------------------------------------------

    async def connect(self, url: str, dialect: str) -> bool:
        """Probe the database and remember the connection on success."""
        self.is_connecting = True
        self.connection_error = None
        try:
            await self._api.connect(url, dialect)
        except ApiError as e:
            self.connection_error = str(e) or "Connection failed"
            return False
        finally:
            self.is_connecting = False

        self.set_connection(Connection(url=url, dialect=dialect, connected=True))
        return True

    def disconnect(self) -> None:
        """Forget the connection and everything cached for it."""
        self.set_connection(None)
        self.set_tables([])
        self.select_table(None)
        self.connection_error = None
        self.editing_rows = {}
        self.is_edit_mode = False

    async def load_tables(self) -> None:
        if not self.connection:
            return

        self.is_loading = True
        self.error = None
        try:
            tables = await self._api.list_tables(self.connection.url, self.connection.dialect)
        except ApiError as e:
            self.error = str(e) or "Failed to load tables"
            return
        finally:
            self.is_loading = False

        self.set_tables([Table.from_dict(t) for t in tables])

    async def load_table_data(self, table_name: str) -> None:
        """Refresh the cached rows of one table."""
        if not self.connection:
            return
        table = next((t for t in self.tables if t.name == table_name), None)
        if table is None:
            return

        self.is_loading = True
        self.error = None
        try:
            rows = await self._api.table_data(
                self.connection.url, self.connection.dialect, table_name
            )
        except ApiError as e:
            self.error = str(e) or "Failed to load table data"
            return
        finally:
            self.is_loading = False

        table.rows = [dict(r) for r in rows]
        self._persist_tables()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def start_editing(self, row_index: int, is_new: bool = False) -> EditSession | None:
        """Open an edit session for a row; an existing session is returned as is."""
        table = self.current_table()
        if table is None:
            return None

        existing = self.editing_rows.get(row_index)
        if existing is not None:
            return existing

        if is_new:
            session = EditSession(row_index=row_index, original=None, edited={}, is_new=True)
        else:
            if not 0 <= row_index < len(table.rows):
                return None
            snapshot = table.rows[row_index]
            session = EditSession(
                row_index=row_index, original=dict(snapshot), edited=dict(snapshot)
            )

        self.editing_rows[row_index] = session
        self.is_edit_mode = True
        return session

    def update_editing_value(self, row_index: int, column: str, value: Any) -> None:
        session = self.editing_rows.get(row_index)
        if session is None:
            return
        session.edited[column] = value

    def cancel_editing(self, row_index: int) -> None:
        self.editing_rows.pop(row_index, None)
        self.is_edit_mode = bool(self.editing_rows)

    def add_new_row(self) -> EditSession | None:
        """Start a draft row after the last cached row, every column blank."""
        table = self.current_table()
        if table is None:
            return None

        row_index = len(table.rows)
        existing = self.editing_rows.get(row_index)
        if existing is not None:
            return existing

        session = EditSession(
            row_index=row_index,
            original=None,
            edited={column.name: "" for column in table.columns},
            is_new=True,
        )
        self.editing_rows[row_index] = session
        self.is_edit_mode = True
        return session

    async def save_editing(self, row_index: int) -> bool:
        """Commit one edit session through the API.

        Returns True when the row was saved. On failure the session stays
        open and ``error`` holds the reason.
        """
        session = self.editing_rows.get(row_index)
        table = self.current_table()
        if session is None or table is None or not self.connection:
            return False

        action = "CREATE" if session.is_new else "UPDATE"
        where_clause = ""
        where_params: list[Any] = []
        if not session.is_new:
            try:
                key, value = identify_row(session.original)
            except ValueError as e:
                self.error = str(e)
                return False
            where_clause = f"{key} = ?"
            where_params = [value]

        try:
            await self._api.crud(
                action,
                self.connection.url,
                self.connection.dialect,
                table.name,
                dict(session.edited),
                where_clause=where_clause,
                where_params=where_params,
            )
        except ApiError as e:
            self.error = str(e) or "Save failed"
            return False

        if session.is_new:
            table.rows.append(dict(session.edited))
        elif row_index < len(table.rows):
            table.rows[row_index] = dict(session.edited)

        if self.editing_rows.get(row_index) is session:
            del self.editing_rows[row_index]
        self.is_edit_mode = bool(self.editing_rows)
        self._persist_tables()
        return True

    async def delete_row(self, row_index: int) -> bool:
        """Delete a row, identified by its first column, and drop it from the cache."""
        table = self.current_table()
        if table is None or not self.connection or not 0 <= row_index < len(table.rows):
            return False

        row = table.rows[row_index]
        try:
            key, value = identify_row(row)
        except ValueError as e:
            self.error = str(e)
            return False

        try:
            await self._api.crud(
                "DELETE",
                self.connection.url,
                self.connection.dialect,
                table.name,
                {},
                where_clause=f"{key} = ?",
                where_params=[value],
            )
        except ApiError as e:
            self.error = str(e) or "Delete failed"
            return False

        if row_index < len(table.rows) and table.rows[row_index] is row:
            del table.rows[row_index]
        self.editing_rows.pop(row_index, None)
        # sessions on later rows follow their row down one slot
        shifted: dict[int, EditSession] = {}
        for index, session in self.editing_rows.items():
            if index > row_index:
                index -= 1
                session.row_index = index
            shifted[index] = session
        self.editing_rows = shifted
        self.is_edit_mode = bool(self.editing_rows)
        self._persist_tables()
        return True


def create_store(base_url: str | None = None) -> DatabaseStore:
    """Store backed by ``settings.STATE_FILE`` and talking to the configured API."""
    api = DbAdminApiClient(base_url or f"http://{settings.API_HOST}:{settings.API_PORT}")
    return DatabaseStore(api, JsonFileKeyValueStore(settings.STATE_FILE))
