"""HTTP client for the database admin API."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DbAdminApiClient:
    """Thin async wrapper over the ``/api`` endpoints.

    Every call returns the decoded success body or raises ``ApiError`` with
    the server's error text.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Where the API is served.
            transport: Optional httpx transport (e.g. ``ASGITransport`` in tests).
            timeout: Request timeout in seconds; ``None`` waits on the database.
        """
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            transport=self._transport,
            timeout=self._timeout,
        ) as client:
            try:
                response = await client.post(path, json=payload)
            except httpx.HTTPError as e:
                raise ApiError(str(e) or "Request failed") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or not body.get("success"):
            message = body.get("detail") or body.get("error") or f"HTTP {response.status_code}"
            raise ApiError(str(message), status_code=response.status_code)
        return body

    async def connect(self, url: str, dialect: str) -> None:
        await self._post("/api/connect", {"url": url, "dialect": dialect})

    async def list_tables(self, url: str, dialect: str) -> list[dict[str, Any]]:
        body = await self._post("/api/tables", {"url": url, "dialect": dialect})
        return body.get("tables", [])

    async def table_data(self, url: str, dialect: str, table_name: str) -> list[dict[str, Any]]:
        body = await self._post(
            "/api/tables/data", {"url": url, "dialect": dialect, "tableName": table_name}
        )
        return body.get("data") or []

    async def crud(
        self,
        action: str,
        url: str,
        dialect: str,
        table_name: str,
        data: dict[str, Any],
        where_clause: str = "",
        where_params: list[Any] | None = None,
    ) -> Any:
        body = await self._post(
            "/api/crud",
            {
                "action": action,
                "url": url,
                "dialect": dialect,
                "tableName": table_name,
                "data": data,
                "whereClause": where_clause,
                "whereParams": where_params or [],
            },
        )
        return body.get("result")

    async def manage_table(
        self,
        action: str,
        url: str,
        dialect: str,
        table_name: str,
        columns: list[dict[str, Any]] | None = None,
        new_table_name: str | None = None,
    ) -> dict[str, Any]:
        body = await self._post(
            "/api/tables/manage",
            {
                "action": action,
                "url": url,
                "dialect": dialect,
                "tableName": table_name,
                "columns": columns,
                "newTableName": new_table_name,
            },
        )
        return body.get("result", {})

    async def run_sql(self, url: str, dialect: str, query: str) -> Any:
        body = await self._post("/api/sql", {"url": url, "dialect": dialect, "query": query})
        return body.get("data")
