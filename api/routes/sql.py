"""Raw SQL shell endpoint."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.deps import ConnectionRequest, read_body, to_http_exception
from core.errors import ValidationError
from services.dispatcher import Action, ActionDispatcher, ActionPayload

router = APIRouter(tags=["sql"])


class SqlRequest(ConnectionRequest):
    """Raw SQL request."""

    query: str | None = None


class SqlResponse(BaseModel):
    """Rows for SELECT statements, ``{"affectedRows": n}`` otherwise."""

    success: bool = True
    data: Any = None


@router.post("/sql", response_model=SqlResponse)
async def run_sql(request: Request) -> SqlResponse:
    """Run one statement typed into the SQL shell."""
    try:
        body = await read_body(request, SqlRequest)
        if not body.query:
            raise ValidationError("Missing required parameters: query, url, dialect")
        data = await ActionDispatcher().perform(
            Action.QUERY, body.descriptor(), payload=ActionPayload(query=body.query)
        )
    except Exception as e:
        raise to_http_exception(e) from e

    return SqlResponse(data=data)
