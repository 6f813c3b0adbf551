"""Row insert/update/delete endpoint."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import AliasChoices, BaseModel, Field

from api.deps import ConnectionRequest, read_body, to_http_exception
from core.errors import UnsupportedError, ValidationError
from services.dispatcher import Action, ActionDispatcher, ActionPayload

router = APIRouter(tags=["crud"])


class CrudRequest(ConnectionRequest):
    """Row mutation request."""

    action: str | None = None
    table_name: str | None = Field(None, validation_alias=AliasChoices("tableName", "table_name"))
    data: Any = None
    where_clause: str | None = Field(
        None, validation_alias=AliasChoices("whereClause", "where_clause")
    )
    where_params: list[Any] | None = Field(
        None, validation_alias=AliasChoices("whereParams", "where_params")
    )


class CrudResponse(BaseModel):
    """Row mutation result."""

    success: bool = True
    result: Any = None


@router.post("/crud", response_model=CrudResponse)
async def crud(request: Request) -> CrudResponse:
    """Insert, update or delete a row of ``tableName``."""
    try:
        body = await read_body(request, CrudRequest)
        if not body.action or not body.table_name:
            raise ValidationError("Missing required fields: action, url, dialect, tableName")
        descriptor = body.descriptor()
        action = Action.parse(body.action)
        if not action.is_crud:
            raise UnsupportedError(f"Unsupported action: {body.action}")
        if body.data is not None and not isinstance(body.data, dict):
            raise ValidationError("data must be an object")
        result = await ActionDispatcher().perform(
            action,
            descriptor,
            body.table_name,
            ActionPayload(
                data=body.data,
                where_clause=body.where_clause,
                where_params=body.where_params or [],
            ),
        )
    except Exception as e:
        raise to_http_exception(e) from e

    return CrudResponse(result=result)
