"""Connection probe endpoint."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from adapters.database import get_adapter
from api.deps import ConnectionRequest, read_body, to_http_exception
from core.dialects import mask_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["connection"])


class ConnectResponse(BaseModel):
    """Successful connection probe."""

    success: bool = True
    message: str = "Database connected successfully"


@router.post("/connect", response_model=ConnectResponse)
async def connect(request: Request) -> ConnectResponse:
    """Open a connection, run ``SELECT 1`` and close it again."""
    try:
        body = await read_body(request, ConnectionRequest)
        descriptor = body.descriptor()
        await get_adapter(descriptor).probe()
    except Exception as e:
        raise to_http_exception(e) from e

    logger.info(f"Connected to {descriptor.dialect.value} at {mask_url(descriptor.url)}")
    return ConnectResponse()
