"""Table listing, table data and schema management endpoints."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import AliasChoices, BaseModel, Field

from adapters.database import get_adapter
from api.deps import ConnectionRequest, read_body, to_http_exception
from core.errors import UnsupportedError, ValidationError
from core.interfaces import TableInfo
from services.dispatcher import Action, ActionDispatcher, ActionPayload
from services.introspector import fetch_rows, list_tables

router = APIRouter(prefix="/tables", tags=["tables"])


class ColumnResponse(BaseModel):
    """Column metadata."""

    name: str
    type: str
    nullable: bool


class TableResponse(BaseModel):
    """Table with sample rows."""

    name: str
    columns: list[ColumnResponse]
    rows: list[dict[str, Any]]
    row_count: int = Field(serialization_alias="rowCount")

    @classmethod
    def from_info(cls, table: TableInfo) -> "TableResponse":
        return cls(
            name=table.name,
            columns=[
                ColumnResponse(name=c.name, type=c.type, nullable=c.nullable)
                for c in table.columns
            ],
            rows=table.rows,
            row_count=table.row_count,
        )


class TableListResponse(BaseModel):
    """Response for the table listing."""

    success: bool = True
    tables: list[TableResponse]


class TableDataRequest(ConnectionRequest):
    """Request for rows of one table."""

    table_name: str | None = Field(None, validation_alias=AliasChoices("tableName", "table_name"))


class TableDataResponse(BaseModel):
    """Rows of one table."""

    success: bool = True
    data: list[dict[str, Any]]


class ManageTableRequest(ConnectionRequest):
    """Schema management request."""

    action: str | None = None
    table_name: str | None = Field(None, validation_alias=AliasChoices("tableName", "table_name"))
    columns: Any = None
    new_table_name: str | None = Field(
        None, validation_alias=AliasChoices("newTableName", "new_table_name")
    )


class ManageTableResponse(BaseModel):
    """Schema management result."""

    success: bool = True
    result: dict[str, Any]


@router.post("", response_model=TableListResponse)
async def get_tables(request: Request) -> TableListResponse:
    """List tables with columns, row counts and up to 100 sample rows each."""
    try:
        body = await read_body(request, ConnectionRequest)
        tables = await list_tables(get_adapter(body.descriptor()))
    except Exception as e:
        raise to_http_exception(e) from e

    return TableListResponse(tables=[TableResponse.from_info(t) for t in tables])


@router.post("/data", response_model=TableDataResponse)
async def get_table_data(request: Request) -> TableDataResponse:
    """Fetch up to 100 rows of one table."""
    try:
        body = await read_body(request, TableDataRequest)
        descriptor = body.descriptor()
        if not body.table_name:
            raise ValidationError("Missing required fields: url, dialect, tableName")
        rows = await fetch_rows(get_adapter(descriptor), body.table_name)
    except Exception as e:
        raise to_http_exception(e) from e

    return TableDataResponse(data=rows)


@router.post("/manage", response_model=ManageTableResponse)
async def manage_table(request: Request) -> ManageTableResponse:
    """Create, drop or rename a table."""
    try:
        body = await read_body(request, ManageTableRequest)
        if not body.action:
            raise ValidationError("Missing required fields: action, url, dialect")
        descriptor = body.descriptor()
        action = Action.parse(body.action)
        if not action.is_schema:
            raise UnsupportedError(f"Unsupported action: {body.action}")
        result = await ActionDispatcher().perform(
            action,
            descriptor,
            body.table_name,
            ActionPayload(columns=body.columns, new_table_name=body.new_table_name),
        )
    except Exception as e:
        raise to_http_exception(e) from e

    return ManageTableResponse(result=result)

