"""SQLite-over-network adapter via libsql-client.

Turso URLs often carry the auth token inline (``...?authToken=xyz``); it is
split out of the URL and handed to the client separately.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import libsql_client

from core.dialects import Dialect, mask_url
from core.errors import DatabaseConnectionError, StatementError
from core.interfaces import IDialectAdapter, IDialectSession, StatementResult, make_row

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "authToken"


def split_auth_token(url: str) -> tuple[str, str | None]:
    """Remove ``authToken`` from the URL query and return (url, token)."""
    parts = urlsplit(url)
    if AUTH_TOKEN_KEY not in parts.query:
        return url, None
    token = None
    kept = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key == AUTH_TOKEN_KEY:
            token = value or None
        else:
            kept.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(kept))), token


class LibsqlSession(IDialectSession):
    """Statement execution on one libsql client."""

    def __init__(self, client: libsql_client.Client):
        self._client = client

    async def execute(
        self,
        statement: str,
        params: Sequence[Any] | None = None,
    ) -> StatementResult:
        try:
            result_set = await self._client.execute(
                statement, list(params) if params is not None else None
            )
        except Exception as e:
            raise StatementError(str(e)) from e

        if result_set.columns:
            columns = list(result_set.columns)
            rows = [make_row(zip(columns, row)) for row in result_set.rows]
            # rows_affected is 0 for PRAGMA and SELECT
            return StatementResult(rows=rows, affected_count=len(rows))
        return StatementResult(
            affected_count=result_set.rows_affected,
            last_insert_id=result_set.last_insert_rowid,
        )


class LibsqlAdapter(IDialectAdapter):
    """SQLite-network (libsql/Turso) dialect adapter."""

    dialect = Dialect.SQLITE_NETWORK

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[LibsqlSession, None]:
        url, auth_token = split_auth_token(self.url)
        logger.debug(f"Opening libsql client for {mask_url(self.url)}")
        try:
            client = libsql_client.create_client(url, auth_token=auth_token)
        except Exception as e:
            raise DatabaseConnectionError(str(e)) from e

        try:
            yield LibsqlSession(client)
        finally:
            await client.close()
