"""Shared request parsing for the database endpoints."""

import logging
from typing import TypeVar

from fastapi import HTTPException, Request
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.dialects import Dialect
from core.errors import DbAdminError, FormatError, ValidationError
from core.interfaces import ConnectionDescriptor

logger = logging.getLogger(__name__)


class ConnectionRequest(BaseModel):
    """Fields every database endpoint accepts.

    All fields are optional at the parsing stage so that a missing field is
    reported as a validation error rather than a malformed body.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    dialect: str | None = Field(None, validation_alias=AliasChoices("dialect", "type"))

    def descriptor(self) -> ConnectionDescriptor:
        """Build the connection descriptor, failing fast on missing fields."""
        if not self.url or not self.dialect:
            raise ValidationError("Missing required fields: url, dialect")
        return ConnectionDescriptor(url=self.url, dialect=Dialect.parse(self.dialect))


BodyT = TypeVar("BodyT", bound=BaseModel)


async def read_body(request: Request, model: type[BodyT]) -> BodyT:
    """Parse the JSON body into ``model``.

    Raises:
        FormatError: If the body is not JSON, not an object, or has fields
            of the wrong shape.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise FormatError() from e
    if not isinstance(payload, dict):
        raise FormatError()
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise FormatError() from e


def to_http_exception(error: Exception) -> HTTPException:
    """Map a domain error to the HTTP status the API reports it with."""
    if isinstance(error, DbAdminError):
        return HTTPException(status_code=error.status_code, detail=str(error))
    logger.exception("Unexpected database error")
    return HTTPException(status_code=500, detail=str(error) or "Database error")
