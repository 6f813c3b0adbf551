"""SQLAlchemy-backed dialect adapter.

Shared by the Postgres and MySQL adapters. Each session builds its own
async engine with ``NullPool`` so the transport connection lives exactly as
long as the ``async with`` block and is disposed of on every exit path.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Sequence

from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.pool import NullPool

from core.dialects import mask_url
from core.errors import DatabaseConnectionError, StatementError
from core.interfaces import IDialectAdapter, IDialectSession, StatementResult, make_row

logger = logging.getLogger(__name__)


def driver_message(exc: BaseException) -> str:
    """Return the driver's own error text, unwrapping SQLAlchemy's DBAPIError."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class SQLAlchemySession(IDialectSession):
    """Statement execution on one open ``AsyncConnection``."""

    def __init__(self, conn: AsyncConnection, reports_insert_id: bool = False):
        self._conn = conn
        self._reports_insert_id = reports_insert_id

    async def execute(
        self,
        statement: str,
        params: Sequence[Any] | None = None,
    ) -> StatementResult:
        """Execute a driver-native statement.

        ``params=None`` runs the statement without parameter substitution so
        raw SQL containing ``%`` or ``:name`` reaches the server untouched.
        """
        try:
            if params is None:
                result = await self._conn.exec_driver_sql(
                    statement, execution_options={"no_parameters": True}
                )
            else:
                result = await self._conn.exec_driver_sql(statement, tuple(params))
        except SQLAlchemyError as e:
            raise StatementError(driver_message(e)) from e

        if result.returns_rows:
            rows = [make_row(row._mapping.items()) for row in result.fetchall()]
            # rowcount is not reliable until the cursor is exhausted
            return StatementResult(rows=rows, affected_count=len(rows))

        last_insert_id = result.lastrowid if self._reports_insert_id else None
        return StatementResult(affected_count=result.rowcount, last_insert_id=last_insert_id)


class SQLAlchemyDialectAdapter(IDialectAdapter):
    """Base class for adapters driven through a SQLAlchemy async engine.

    Subclasses provide the async driver URL and any driver connect arguments.
    """

    reports_insert_id: bool = False

    def engine_url(self) -> Any:
        """Return the SQLAlchemy URL (string or ``URL``) for this database."""
        raise NotImplementedError

    def connect_args(self) -> dict[str, Any]:
        """Extra keyword arguments handed to the DBAPI ``connect()``."""
        return {}

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[SQLAlchemySession, None]:
        """Open a connection, commit on success, always dispose the engine."""
        try:
            engine = create_async_engine(
                self.engine_url(),
                poolclass=NullPool,
                connect_args=self.connect_args(),
            )
        except (ArgumentError, ValueError) as e:
            raise DatabaseConnectionError(f"Invalid connection URL: {e}") from e

        try:
            logger.debug(f"Opening {self.dialect.value} connection to {mask_url(self.url)}")
            try:
                conn = await engine.connect()
            except (SQLAlchemyError, OSError) as e:
                raise DatabaseConnectionError(driver_message(e)) from e

            try:
                yield SQLAlchemySession(conn, reports_insert_id=self.reports_insert_id)
                try:
                    await conn.commit()
                except SQLAlchemyError as e:
                    raise StatementError(driver_message(e)) from e
            finally:
                await conn.close()
        finally:
            await engine.dispose()
