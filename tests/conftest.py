"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adapters.database import LibsqlAdapter, register_adapter
from adapters.database.base import SQLAlchemyDialectAdapter
from api.main import app
from client import DatabaseStore, DbAdminApiClient, InMemoryKeyValueStore
from core.dialects import Dialect


class LocalSQLiteAdapter(SQLAlchemyDialectAdapter):
    """Runs the SQLite-network dialect against a local file via aiosqlite.

    The URL is the path of the database file.
    """

    dialect = Dialect.SQLITE_NETWORK
    reports_insert_id = True

    def engine_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.url}"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of an empty SQLite database file."""
    return tmp_path / "test.db"


@pytest.fixture
def local_sqlite() -> Generator[None, None, None]:
    """Serve the ``turso`` dialect from local SQLite files for the test."""
    register_adapter(Dialect.SQLITE_NETWORK, LocalSQLiteAdapter)
    yield
    register_adapter(Dialect.SQLITE_NETWORK, LibsqlAdapter)


@pytest.fixture
def sqlite_adapter(db_path: Path) -> LocalSQLiteAdapter:
    """Adapter bound to the empty test database."""
    return LocalSQLiteAdapter(str(db_path))


@pytest.fixture
def conn_body(db_path: Path, local_sqlite) -> dict:
    """Connection fields for API requests against the test database."""
    return {"url": str(db_path), "dialect": "turso"}


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def api_client() -> DbAdminApiClient:
    """API client wired straight to the ASGI app."""
    return DbAdminApiClient(base_url="http://test", transport=ASGITransport(app=app))


@pytest.fixture
def store(api_client: DbAdminApiClient) -> DatabaseStore:
    """Store with in-memory persistence talking to the ASGI app."""
    return DatabaseStore(api_client, InMemoryKeyValueStore())
