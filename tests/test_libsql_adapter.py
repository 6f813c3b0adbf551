"""Tests for the libsql (SQLite-network) adapter with a fake client."""

from types import SimpleNamespace

import libsql_client
import pytest

from adapters.database.libsql import LibsqlAdapter, split_auth_token
from core.errors import DatabaseConnectionError, StatementError


class FakeClient:
    """Stand-in for a libsql client recording calls."""

    def __init__(self, result_set=None, error: Exception | None = None):
        self.result_set = result_set
        self.error = error
        self.calls: list[tuple[str, object]] = []
        self.closed = False

    async def execute(self, statement, args=None):
        self.calls.append((statement, args))
        if self.error is not None:
            raise self.error
        return self.result_set

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    """Patch create_client and capture the arguments it was given."""
    client = FakeClient()
    created = {}

    def create_client(url, auth_token=None):
        created["url"] = url
        created["auth_token"] = auth_token
        return client

    monkeypatch.setattr(libsql_client, "create_client", create_client)
    client.created = created
    return client


def test_split_auth_token():
    url, token = split_auth_token("libsql://db-org.turso.io?authToken=abc.def")
    assert url == "libsql://db-org.turso.io"
    assert token == "abc.def"


def test_split_auth_token_keeps_other_params():
    url, token = split_auth_token("libsql://db.turso.io?tls=1&authToken=t")
    assert url == "libsql://db.turso.io?tls=1"
    assert token == "t"


def test_split_auth_token_absent():
    assert split_auth_token("libsql://db.turso.io") == ("libsql://db.turso.io", None)


@pytest.mark.asyncio
async def test_token_passed_to_client(fake_client):
    fake_client.result_set = SimpleNamespace(columns=("1",), rows=[(1,)])

    await LibsqlAdapter("libsql://db.turso.io?authToken=secret").probe()

    assert fake_client.created == {"url": "libsql://db.turso.io", "auth_token": "secret"}
    assert fake_client.calls == [("SELECT 1", None)]
    assert fake_client.closed is True


@pytest.mark.asyncio
async def test_rows_mapped_by_column(fake_client):
    fake_client.result_set = SimpleNamespace(
        columns=("id", "name"), rows=[(1, "a"), (2, "b")]
    )

    result = await LibsqlAdapter("libsql://x").execute("SELECT id, name FROM t")

    assert result.rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


@pytest.mark.asyncio
async def test_write_reports_affected_rows(fake_client):
    fake_client.result_set = SimpleNamespace(
        columns=(), rows=[], rows_affected=3, last_insert_rowid=9
    )

    result = await LibsqlAdapter("libsql://x").execute("UPDATE t SET a = ?", [1])

    assert fake_client.calls == [("UPDATE t SET a = ?", [1])]
    assert result.rows is None
    assert result.affected_count == 3
    assert result.last_insert_id == 9


@pytest.mark.asyncio
async def test_failed_statement_closes_client(fake_client):
    fake_client.error = RuntimeError("SQLITE_ERROR: no such table: t")

    with pytest.raises(StatementError, match="no such table"):
        await LibsqlAdapter("libsql://x").execute("SELECT * FROM t")

    assert fake_client.closed is True


@pytest.mark.asyncio
async def test_failed_probe_is_connection_error(fake_client):
    fake_client.error = RuntimeError("connection refused")

    with pytest.raises(DatabaseConnectionError, match="connection refused"):
        await LibsqlAdapter("libsql://x").probe()


@pytest.mark.asyncio
async def test_client_creation_failure(monkeypatch):
    def create_client(url, auth_token=None):
        raise ValueError("Unsupported URL scheme")

    monkeypatch.setattr(libsql_client, "create_client", create_client)

    with pytest.raises(DatabaseConnectionError, match="Unsupported URL scheme"):
        await LibsqlAdapter("ftp://x").probe()


@pytest.mark.asyncio
async def test_row_sets_report_row_count(fake_client):
    fake_client.result_set = SimpleNamespace(
        columns=("name",), rows=[("id",), ("label",)], rows_affected=0, last_insert_rowid=None
    )

    result = await LibsqlAdapter("libsql://x").execute("PRAGMA table_info(t)")

    assert result.rows == [{"name": "id"}, {"name": "label"}]
    assert result.affected_count == 2


@pytest.mark.asyncio
async def test_blob_values_returned_as_hex(fake_client):
    fake_client.result_set = SimpleNamespace(
        columns=("id", "data"), rows=[(1, b"\xff\x00")], rows_affected=0, last_insert_rowid=None
    )

    result = await LibsqlAdapter("libsql://x").execute("SELECT id, data FROM files")

    assert result.rows == [{"id": 1, "data": "ff00"}]
