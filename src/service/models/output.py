"""
Output models for API responses using Pydantic.

Both models serialize to the compact JSON carried in the ``body`` field of
the API Gateway proxy result.
"""

from typing import Annotated

from pydantic import BaseModel, Field

from service.models.payload import FaultKind


class MessageOutput(BaseModel):
    """Response body returned for every accepted payload."""

    message: Annotated[str, Field(
        description='Identifies the function that handled the request',
        examples=['This is function1', 'This is function2']
    )]


class ErrorOutput(BaseModel):
    """Response body returned when the request body is unusable."""

    message: Annotated[str, Field(
        description='Generic error message'
    )] = 'Malformed request body'

    error: Annotated[FaultKind, Field(
        description='Fault classification',
        examples=['MISSING_BODY', 'INVALID_JSON']
    )]

    detail: Annotated[str, Field(
        description='Reason the body was rejected',
        examples=['Event has no body']
    )]
